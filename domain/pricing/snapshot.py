"""
Cart snapshot loading - joins the user's cart rows with the live catalog view
"""
from __future__ import annotations

from domain.cart.entity import CartSnapshot, CartSnapshotLine
from domain.cart.repository import CartRepository
from domain.catalog.repository import ProductCatalogRepository
from domain.common.exceptions import ProductUnavailableException


async def load_cart_snapshot(
    user_id: int,
    cart_repository: CartRepository,
    product_repository: ProductCatalogRepository,
) -> CartSnapshot:
    lines = await cart_repository.get_cart_lines(user_id)
    if not lines:
        return CartSnapshot(user_id=user_id)

    products = await product_repository.read_for_pricing(line.product_id for line in lines)
    snapshot_lines = []
    for line in lines:
        product = products.get(line.product_id)
        if product is None:
            # Deleted from the catalog since it was added to the cart
            raise ProductUnavailableException(line.product_id)
        snapshot_lines.append(
            CartSnapshotLine(
                product_id=product.product_id,
                unit_price=product.unit_price,
                quantity=line.quantity,
                product_active=product.is_active,
                available_stock=product.stock,
                name=product.name,
            )
        )
    return CartSnapshot(user_id=user_id, lines=snapshot_lines)
