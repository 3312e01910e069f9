from .controller import SalesController

__all__ = ["SalesController"]
