"""
Order API routes - FastAPI presentation layer
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from application.services.order_service import OrderApplicationService
from core.response import success_response, paginated_response, Response as ApiResponse, PaginatedData
from application.dto import (
    CalculateOrderDTO,
    PlaceOrderDTO,
    UpdatePaymentStatusDTO,
    PriceBreakdownDTO,
    OrderResponseDTO,
    PaginationParams,
)
from api.dependencies import get_current_user_id, get_order_service
from domain.order.entity import OrderStatus

router = APIRouter(
    prefix="/orders",
    tags=["Orders"]
)


@router.post("/calculate", summary="Preview order pricing", response_model=ApiResponse[PriceBreakdownDTO])
async def calculate_order(
    payload: CalculateOrderDTO,
    user_id: int = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
):
    """
    Price the current cart without reserving anything

    - **coupon_code**: coupon to apply (optional)
    - **use_wallet_points**: apply wallet points
    - **wallet_points_to_use**: explicit amount; omit to apply as many as the order allows
    """
    breakdown = await service.calculate_preview(user_id, payload)
    return success_response(data=breakdown, message="Order calculated")


@router.post(
    "",
    summary="Place order",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[OrderResponseDTO],
)
async def place_order(
    payload: PlaceOrderDTO,
    user_id: int = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
):
    """
    Turn the cart into a PENDING order

    Stock, wallet points and coupon usage are reserved atomically; the cart is
    cleared and a PENDING payment transaction is opened.
    """
    order = await service.place_order(user_id, payload)
    return success_response(data=order, message="Order placed")


@router.get(
    "",
    summary="List my orders",
    response_model=ApiResponse[PaginatedData[OrderResponseDTO]],
)
async def list_orders(
    params: PaginationParams = Depends(),
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Filter by order status"),
    user_id: int = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
):
    orders, total = await service.list_orders(user_id, order_status, params.skip, params.limit)
    return paginated_response(
        items=orders,
        total=total,
        page=params.page,
        size=params.limit,
        message="Orders retrieved"
    )


@router.get("/{order_id}", summary="Get order", response_model=ApiResponse[OrderResponseDTO])
async def get_order(
    order_id: str,
    user_id: int = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
):
    order = await service.get_order(order_id, user_id)
    return success_response(data=order, message="Order retrieved")


@router.patch(
    "/{order_id}/payment-status",
    summary="Apply payment outcome",
    response_model=ApiResponse[OrderResponseDTO],
)
async def update_payment_status(
    order_id: str,
    payload: UpdatePaymentStatusDTO,
    user_id: int = Depends(get_current_user_id),
    service: OrderApplicationService = Depends(get_order_service),
):
    """
    Reconcile a PENDING order with the gateway outcome

    - **SUCCESS**: order becomes CONFIRMED
    - **FAILED**: order becomes CANCELLED and reserved stock, wallet points and
      coupon usage are released
    """
    order = await service.update_payment_status(order_id, user_id, payload)
    return success_response(data=order, message="Payment status updated")
