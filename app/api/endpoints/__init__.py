from . import transactions

__all__ = [
    "transactions",
]
