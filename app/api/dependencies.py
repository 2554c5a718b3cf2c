from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.transactions.gateway import TransactionGateway


async def get_transaction_gateway(db: AsyncSession = Depends(get_db)) -> TransactionGateway:
    """Gateway bound to the request's database session"""
    return TransactionGateway(db)
