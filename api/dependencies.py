"""
API dependencies - caller identity and service wiring
"""
from fastapi import Header

from application.services.order_service import OrderApplicationService
from core.exceptions import UnauthorizedException
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


async def get_order_service() -> OrderApplicationService:
    return OrderApplicationService(uow_factory=SQLAlchemyUnitOfWork)


async def get_current_user_id(x_user_id: str = Header(None, alias="X-User-ID")) -> int:
    """Caller identity, set by the upstream auth gateway after authentication"""
    if not x_user_id:
        raise UnauthorizedException("Missing X-User-ID header")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise UnauthorizedException("Invalid X-User-ID header")
    if user_id <= 0:
        raise UnauthorizedException("Invalid X-User-ID header")
    return user_id
