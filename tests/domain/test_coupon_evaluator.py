from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.common.exceptions import (
    CouponExpiredException,
    CouponInactiveException,
    CouponUsageLimitReachedException,
    MinPurchaseNotMetException,
    NotEligibleException,
    ResourceExhaustedException,
    UserCouponLimitReachedException,
)
from domain.coupon import Coupon, CouponEvaluator, DiscountType, UserCouponUsage


NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_coupon(**overrides) -> Coupon:
    fields = dict(
        id=1,
        code="SAVE20",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("20"),
        valid_from=NOW - timedelta(days=1),
        valid_to=NOW + timedelta(days=1),
    )
    fields.update(overrides)
    return Coupon(**fields)


evaluator = CouponEvaluator()


def test_percentage_capped_at_max_discount():
    coupon = make_coupon(max_discount=Decimal("150"))
    assert evaluator.evaluate(coupon, Decimal("1000"), None, NOW) == Decimal("150")


def test_percentage_without_cap():
    coupon = make_coupon()
    assert evaluator.evaluate(coupon, Decimal("250"), None, NOW) == Decimal("50")


def test_fixed_capped_at_subtotal():
    coupon = make_coupon(discount_type=DiscountType.FIXED, discount_value=Decimal("80"))
    assert evaluator.evaluate(coupon, Decimal("50"), None, NOW) == Decimal("50")
    assert evaluator.evaluate(coupon, Decimal("500"), None, NOW) == Decimal("80")


def test_fixed_ignores_max_discount():
    coupon = make_coupon(
        discount_type=DiscountType.FIXED,
        discount_value=Decimal("80"),
        max_discount=Decimal("10"),
    )
    assert evaluator.evaluate(coupon, Decimal("500"), None, NOW) == Decimal("80")


def test_validity_window_is_inclusive():
    coupon = make_coupon(valid_from=NOW, valid_to=NOW)
    assert evaluator.evaluate(coupon, Decimal("100"), None, NOW) == Decimal("20")


def test_inactive_checked_before_expiry():
    coupon = make_coupon(is_active=False, valid_to=NOW - timedelta(days=1))
    with pytest.raises(CouponInactiveException) as exc_info:
        evaluator.evaluate(coupon, Decimal("100"), None, NOW)
    assert isinstance(exc_info.value, NotEligibleException)


def test_expired_and_not_yet_valid():
    with pytest.raises(CouponExpiredException):
        evaluator.evaluate(make_coupon(valid_to=NOW - timedelta(seconds=1)), Decimal("100"), None, NOW)
    with pytest.raises(CouponExpiredException):
        evaluator.evaluate(make_coupon(valid_from=NOW + timedelta(seconds=1)), Decimal("100"), None, NOW)


def test_min_purchase_not_met():
    coupon = make_coupon(min_purchase=Decimal("500"))
    with pytest.raises(MinPurchaseNotMetException) as exc_info:
        evaluator.evaluate(coupon, Decimal("499.99"), None, NOW)
    assert exc_info.value.details["min_purchase"] == "500"


def test_global_limit_reached():
    coupon = make_coupon(total_usage_limit=5, current_usage_count=5)
    with pytest.raises(CouponUsageLimitReachedException) as exc_info:
        evaluator.evaluate(coupon, Decimal("100"), None, NOW)
    assert isinstance(exc_info.value, ResourceExhaustedException)


def test_per_user_limit_reached():
    coupon = make_coupon(usage_limit_per_user=1)
    usage = UserCouponUsage(user_id=7, coupon_id=1, usage_count=1)
    with pytest.raises(UserCouponLimitReachedException):
        evaluator.evaluate(coupon, Decimal("100"), usage, NOW)


def test_global_limit_checked_before_user_limit():
    coupon = make_coupon(total_usage_limit=1, current_usage_count=1, usage_limit_per_user=1)
    usage = UserCouponUsage(user_id=7, coupon_id=1, usage_count=1)
    with pytest.raises(CouponUsageLimitReachedException):
        evaluator.evaluate(coupon, Decimal("100"), usage, NOW)


def test_naive_datetimes_treated_as_utc():
    coupon = make_coupon(valid_from=datetime(2026, 5, 1), valid_to=datetime(2026, 7, 1))
    assert coupon.is_within_validity(NOW)
