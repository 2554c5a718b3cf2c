from sqlalchemy import String, BigInteger, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from app.core.database import Base


class TransactionRecord(Base):
    """One stored financial transaction; rows are never updated or deleted"""
    __tablename__ = "transactions"

    date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    cents_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency_code: Mapped[str] = mapped_column(String, nullable=False)
    reference: Mapped[str] = mapped_column(String, nullable=False)

    # Merchant
    merchant_name: Mapped[str] = mapped_column(String, nullable=False)
    merchant_city: Mapped[str] = mapped_column(String, nullable=False)
    merchant_country_code: Mapped[str] = mapped_column(String, nullable=False)
    merchant_country_name: Mapped[str] = mapped_column(String, nullable=False)
    merchant_category_code: Mapped[str] = mapped_column(String, nullable=False)
    merchant_category_name: Mapped[str] = mapped_column(String, nullable=False)
