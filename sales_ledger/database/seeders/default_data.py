# Demo catalog so a fresh install opens with something to enter.
DEMO_PRODUCTS = [
    # name, stock, original_stock, price, sort_weight
    ("Apple Juice 500ml", 40, 6, 35, 10),
    ("Oolong Tea 600ml", 36, 0, 30, 20),
    ("Soy Milk 1L", 18, 4, 45, 30),
    ("Rice Crackers", 25, 10, 60, 40),
    ("Peanut Brittle", 12, 3, 80, 50),
]


def seed(conn):
    # only seed an empty catalog
    row = conn.execute("SELECT COUNT(*) AS n FROM products").fetchone()
    if row and row["n"] == 0:
        conn.executemany(
            """
            INSERT INTO products(name, stock, original_stock, price, sort_weight)
            VALUES (?, ?, ?, ?, ?)
            """,
            DEMO_PRODUCTS,
        )
        conn.commit()
