from typing import List
from datetime import timezone
import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import PersistenceError
from app.db.models import TransactionRecord
from app.transactions.schemas import Transaction


# Stored columns in wire field order; the implicit id is never read back
TRANSACTION_COLUMNS = (
    TransactionRecord.date_time,
    TransactionRecord.cents_amount,
    TransactionRecord.currency_code,
    TransactionRecord.reference,
    TransactionRecord.merchant_name,
    TransactionRecord.merchant_city,
    TransactionRecord.merchant_country_code,
    TransactionRecord.merchant_country_name,
    TransactionRecord.merchant_category_code,
    TransactionRecord.merchant_category_name,
)


class TransactionGateway:
    """Reads and writes transactions against the transactions table"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = structlog.get_logger("TransactionGateway")

    async def insert(self, transaction: Transaction) -> None:
        """Insert one transaction; the session is rolled back on any error"""
        values = transaction.model_dump()

        try:
            await self.db.execute(insert(TransactionRecord).values(**values))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error("Error inserting transaction", reference=transaction.reference, error=str(e))
            raise PersistenceError(f"Error inserting transaction: {e}") from e

        self.logger.info(
            "Transaction stored",
            reference=transaction.reference,
            cents_amount=transaction.cents_amount,
            currency_code=transaction.currency_code,
        )

    async def fetch_all(self) -> List[Transaction]:
        """
        Fetch every stored transaction.

        No ordering is applied, rows come back in whatever order the
        storage engine returns them.
        """
        try:
            result = await self.db.execute(select(*TRANSACTION_COLUMNS))
            transactions = [self._to_transaction(row) for row in result.mappings()]
        except (SQLAlchemyError, ValueError) as e:
            await self.db.rollback()
            self.logger.error("Error reading transactions", error=str(e))
            raise PersistenceError(f"Error reading transactions: {e}") from e

        self.logger.info("Transactions fetched", count=len(transactions))
        return transactions

    @staticmethod
    def _to_transaction(row) -> Transaction:
        values = dict(row)
        date_time = values["date_time"]
        # SQLite drops the offset; stored values are always UTC
        if date_time.tzinfo is None:
            values["date_time"] = date_time.replace(tzinfo=timezone.utc)
        return Transaction.model_validate(values)
