"""
Wallet database model - one points balance per user
"""
from sqlalchemy import CheckConstraint, Column, Integer, Numeric

from .base import Base, updated_at_column


class WalletModel(Base):
    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_wallets_balance_non_negative"),
    )

    user_id = Column(Integer, primary_key=True, autoincrement=False, comment="Wallet owner")
    balance = Column(
        Numeric(precision=15, scale=2), nullable=False, default=0, comment="Points balance"
    )

    updated_at = updated_at_column()
