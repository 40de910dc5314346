"""
Wallet repository - balance reads plus conditional debit and credit
"""
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.wallet.repository import WalletRepository
from infrastructure.models.wallet import WalletModel
from core.logging_config import get_logger


logger = get_logger(__name__)


class SQLAlchemyWalletRepository(WalletRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def read_balance(self, user_id: int) -> Decimal:
        result = await self.session.execute(
            select(WalletModel.balance).where(WalletModel.user_id == user_id)
        )
        balance = result.scalar_one_or_none()
        return Decimal(str(balance)) if balance is not None else Decimal("0")

    async def conditional_debit(self, user_id: int, amount: Decimal) -> bool:
        result = await self.session.execute(
            update(WalletModel)
            .where(WalletModel.user_id == user_id, WalletModel.balance >= amount)
            .values(balance=WalletModel.balance - amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount > 0:
            logger.info("wallet_debited", user_id=user_id, amount=amount)
            return True

        logger.warning("wallet_debit_rejected", user_id=user_id, amount=amount)
        return False

    async def credit(self, user_id: int, amount: Decimal) -> None:
        result = await self.session.execute(
            update(WalletModel)
            .where(WalletModel.user_id == user_id)
            .values(balance=WalletModel.balance + amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.session.add(WalletModel(user_id=user_id, balance=amount))
            await self.session.flush()
        logger.info("wallet_credited", user_id=user_id, amount=amount)
