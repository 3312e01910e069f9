# sales_ledger/database/repositories/clone_slot_repo.py
import json
import sqlite3

from ...modules.ledger.session import CloneSnapshot


class CloneSlotRepo:
    """
    Single-slot hand-off for "clone this sale": `put` replaces whatever is
    waiting, `take` returns it and empties the slot in the same transaction.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def put(self, snapshot: CloneSnapshot) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO clone_slot(id, payload) VALUES (1, ?)",
            (json.dumps(snapshot.to_dict()),),
        )
        self.conn.commit()

    def take(self) -> CloneSnapshot | None:
        try:
            r = self.conn.execute("SELECT payload FROM clone_slot WHERE id=1").fetchone()
            if r is None:
                return None
            self.conn.execute("DELETE FROM clone_slot WHERE id=1")
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        return CloneSnapshot.from_dict(json.loads(r["payload"]))
