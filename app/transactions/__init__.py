from .schemas import Transaction
from .gateway import TransactionGateway

__all__ = [
    "Transaction",
    "TransactionGateway",
]
