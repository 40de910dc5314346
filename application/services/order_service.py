"""
Order application service - orchestrates settlement use-cases inside units of work
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from application.dto import (
    CalculateOrderDTO,
    OrderItemDTO,
    OrderResponseDTO,
    PaymentTransactionDTO,
    PlaceOrderDTO,
    PriceBreakdownDTO,
    PricedLineDTO,
    UpdatePaymentStatusDTO,
)
from core.config import settings
from core.logging_config import get_logger
from domain.common.exceptions import OrderNotFoundException, SettlementTimeoutException
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.order.entity import Order, OrderStatus, PaymentOutcome
from domain.order.service import OrderSettlementService
from domain.pricing.calculator import PriceBreakdown


logger = get_logger(__name__)

T = TypeVar("T")


class OrderApplicationService:
    """Order application service"""

    def __init__(
        self,
        uow_factory: Callable[..., AbstractUnitOfWork],
        timeout_seconds: Optional[float] = None,
    ):
        self._uow_factory = uow_factory
        self._timeout = timeout_seconds or settings.settlement.timeout_seconds

    async def _bounded(self, operation: str, work: Callable[[], Awaitable[T]]) -> T:
        """Run settlement work with an upper time bound.

        Expiry cancels the work while it is still inside its unit of work, so the
        unit of work rolls back and nothing written so far persists.
        """
        try:
            return await asyncio.wait_for(work(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("settlement_timeout", operation=operation, timeout=self._timeout)
            raise SettlementTimeoutException(operation, self._timeout)

    async def calculate_preview(self, user_id: int, dto: CalculateOrderDTO) -> PriceBreakdownDTO:
        """Price the current cart without reserving anything"""
        async with self._uow_factory(readonly=True) as uow:
            service = OrderSettlementService(uow)
            breakdown = await service.preview(
                user_id,
                coupon_code=dto.coupon_code,
                use_wallet=dto.use_wallet_points,
                wallet_points_requested=dto.wallet_points_to_use,
            )
            return self._to_breakdown_dto(breakdown)

    async def place_order(self, user_id: int, dto: PlaceOrderDTO) -> OrderResponseDTO:
        async with self._uow_factory() as uow:
            service = OrderSettlementService(uow)
            order = await self._bounded(
                "place_order",
                lambda: service.commit(
                    user_id,
                    coupon_code=dto.coupon_code,
                    use_wallet=dto.use_wallet_points,
                    wallet_points_requested=dto.wallet_points_to_use,
                    payment_method=dto.payment_method,
                ),
            )
            events = service.clear_events()

        self._log_events(events)
        logger.info(
            "order_committed",
            order_id=order.id,
            user_id=user_id,
            final_amount=order.final_amount,
            coupon_id=order.coupon_id,
            wallet_points_used=order.wallet_points_used,
        )
        return self._to_response_dto(order)

    async def update_payment_status(
        self, order_id: str, user_id: int, dto: UpdatePaymentStatusDTO
    ) -> OrderResponseDTO:
        async with self._uow_factory() as uow:
            service = OrderSettlementService(uow)
            order = await self._bounded(
                "update_payment_status",
                lambda: service.reconcile(
                    order_id,
                    user_id,
                    PaymentOutcome(dto.payment_status),
                    payment_method=dto.payment_method,
                    transaction_id=dto.transaction_id,
                ),
            )
            events = service.clear_events()

        self._log_events(events)
        logger.info(
            "order_reconciled",
            order_id=order.id,
            payment_status=order.payment_status.value,
            order_status=order.order_status.value,
        )
        return self._to_response_dto(order)

    @staticmethod
    def _log_events(events: List) -> None:
        for domain_event in events:
            logger.info(
                "domain_event",
                event_type=type(domain_event).__name__,
                order_id=domain_event.order_id,
                event_id=domain_event.event_id,
            )

    async def get_order(self, order_id: str, user_id: int) -> OrderResponseDTO:
        async with self._uow_factory(readonly=True) as uow:
            order = await uow.order_repository.get_by_id(order_id, user_id=user_id)
            if not order:
                raise OrderNotFoundException(order_id)
            return self._to_response_dto(order)

    async def list_orders(
        self,
        user_id: int,
        status: Optional[OrderStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[OrderResponseDTO], int]:
        """User's orders, newest first, with the total count"""
        async with self._uow_factory(readonly=True) as uow:
            orders = await uow.order_repository.list_by_user(user_id, skip, limit, status)
            total = await uow.order_repository.count_by_user(user_id, status)
            return [self._to_response_dto(order) for order in orders], int(total)

    def _to_breakdown_dto(self, breakdown: PriceBreakdown) -> PriceBreakdownDTO:
        return PriceBreakdownDTO(
            subtotal=breakdown.subtotal,
            coupon_code=breakdown.coupon_code,
            coupon_id=breakdown.coupon_id,
            coupon_discount=breakdown.coupon_discount,
            wallet_points_available=breakdown.wallet_points_available,
            wallet_points_used=breakdown.wallet_points_used,
            final_amount=breakdown.final_amount,
            items=[
                PricedLineDTO(
                    product_id=line.product_id,
                    name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    line_total=line.line_total,
                )
                for line in breakdown.lines
            ],
        )

    def _to_response_dto(self, order: Order) -> OrderResponseDTO:
        return OrderResponseDTO(
            id=order.id,
            user_id=order.user_id,
            total_amount=order.total_amount,
            coupon_id=order.coupon_id,
            coupon_code=order.coupon_code,
            coupon_discount=order.coupon_discount,
            wallet_points_used=order.wallet_points_used,
            final_amount=order.final_amount,
            payment_status=order.payment_status.value,
            order_status=order.order_status.value,
            items=[
                OrderItemDTO(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            transaction=PaymentTransactionDTO(
                payment_status=order.transaction.payment_status.value,
                payment_method=order.transaction.payment_method,
                transaction_id=order.transaction.transaction_id,
            ) if order.transaction else None,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
