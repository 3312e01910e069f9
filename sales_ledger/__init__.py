"""Point-of-sale ledger entry tool."""

__version__ = "0.1.0"
