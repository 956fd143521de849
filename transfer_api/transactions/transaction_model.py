# transfer_api/transactions/transaction_model.py
import enum

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Integer, String

from transfer_api.config.database.db_config import Base


class TransactionStatus(str, enum.Enum):
    PROCESSING = "PROCESSING"
    PROCESSED = "PROCESSED"


class TransactionDB(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(String, unique=True, index=True, nullable=False)
    source_account = Column(String, nullable=False)
    destination_account = Column(String, nullable=False)
    amount = Column(BigInteger, nullable=False)  # minor units
    currency = Column(String, nullable=False)
    status = Column(String, nullable=False, default=TransactionStatus.PROCESSING.value)
    created_at = Column(DateTime(timezone=True), nullable=False)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
