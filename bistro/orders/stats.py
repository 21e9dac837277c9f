"""Модуль статистики заказов для админки."""
import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from bistro.config import settings
from bistro.models import OrderStatus, OrderType, PaymentStatus
from bistro.utils import (
    as_record,
    as_records,
    date_key,
    end_of_day,
    enum_value,
    is_number,
    parse_date,
    parse_datetime,
    round_half_up,
    start_of_day,
    utc_today,
)

logger = logging.getLogger(__name__)

STATUSES = frozenset(s.value for s in OrderStatus)


@dataclass
class OrderStats:
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    preparing: int = 0
    ready: int = 0
    delivered: int = 0
    cancelled: int = 0
    total_revenue: float = 0
    paid_orders: int = 0
    unpaid_orders: int = 0
    delivery_orders: int = 0
    pickup_orders: int = 0


@dataclass
class RevenueStats:
    total_revenue: float = 0
    paid_revenue: float = 0
    unpaid_revenue: float = 0
    order_count: int = 0


@dataclass
class PopularItem:
    id: Any
    name: str
    count: int = 0           # в скольких строках заказов встречается
    total_quantity: int = 0  # сколько штук заказано всего


@dataclass
class CompletionRate:
    total: int = 0
    completed: int = 0
    cancelled: int = 0
    completion_rate: float = 0
    cancellation_rate: float = 0


@dataclass
class StatusGroup:
    status: str
    count: int = 0
    orders: list[Mapping[str, Any]] = field(default_factory=list)


@dataclass
class DailyOrderStats:
    date: str
    order_count: int = 0
    revenue: float = 0
    delivered_count: int = 0
    cancelled_count: int = 0


def _price(order: Mapping[str, Any]) -> float:
    value = order.get("totalPrice")
    return value if is_number(value) else 0


def _is_paid_delivery(order: Mapping[str, Any]) -> bool:
    """Выручка — только доставленные и оплаченные заказы."""
    return (
        enum_value(order.get("status")) == OrderStatus.DELIVERED.value
        and enum_value(order.get("paymentStatus")) == PaymentStatus.PAID.value
    )


def calculate_order_stats(orders: Any) -> OrderStats:
    """Счётчики по статусам, оплате и типу заказа + выручка."""
    records = as_records(orders)
    stats = OrderStats(total=len(records))

    for order in records:
        status = enum_value(order.get("status"))
        if isinstance(status, str) and status in STATUSES:
            setattr(stats, status, getattr(stats, status) + 1)

        if _is_paid_delivery(order):
            stats.total_revenue += _price(order)

        if enum_value(order.get("paymentStatus")) == PaymentStatus.PAID.value:
            stats.paid_orders += 1
        else:
            stats.unpaid_orders += 1

        order_type = enum_value(order.get("orderType"))
        if order_type == OrderType.DELIVERY.value:
            stats.delivery_orders += 1
        elif order_type == OrderType.PICKUP.value:
            stats.pickup_orders += 1

    logger.debug(
        "order_stats_calculated",
        extra={"total": stats.total, "revenue": stats.total_revenue}
    )

    return stats


def calculate_revenue(orders: Any, start_date: Any = None, end_date: Any = None) -> RevenueStats:
    """
    Выручка за период по доставленным заказам.

    Args:
        start_date: YYYY-MM-DD / date; по умолчанию — с начала времён
        end_date: YYYY-MM-DD / date; по умолчанию — сегодня. Конец дня включительно.
    """
    if not isinstance(orders, (list, tuple)):
        return RevenueStats()
    records = as_records(orders)

    start_day = parse_date(start_date)
    end_day = parse_date(end_date)
    # Заданная, но нераспознанная граница не совпадает ни с одним заказом
    if (start_date and start_day is None) or (end_date and end_day is None):
        return RevenueStats()

    start = start_of_day(start_day) if start_day else datetime.min.replace(tzinfo=timezone.utc)
    end = end_of_day(end_day or utc_today())

    in_range = []
    for order in records:
        created_at = parse_datetime(order.get("createdAt"))
        if created_at is None:
            continue
        if start <= created_at <= end and enum_value(order.get("status")) == OrderStatus.DELIVERED.value:
            in_range.append(order)

    paid = [o for o in in_range if enum_value(o.get("paymentStatus")) == PaymentStatus.PAID.value]
    unpaid = [o for o in in_range if enum_value(o.get("paymentStatus")) == PaymentStatus.PENDING.value]

    return RevenueStats(
        total_revenue=sum(_price(o) for o in in_range),
        paid_revenue=sum(_price(o) for o in paid),
        unpaid_revenue=sum(_price(o) for o in unpaid),
        order_count=len(in_range),
    )


def calculate_average_order_value(orders: Any, filters: Mapping[str, Any] | None = None) -> float:
    """Средний чек, округлённый до копеек. Фильтры: status, paymentStatus."""
    records = as_records(orders)
    filters = filters or {}

    if filters.get("status"):
        status = enum_value(filters["status"])
        records = [o for o in records if enum_value(o.get("status")) == status]

    if filters.get("paymentStatus"):
        payment_status = enum_value(filters["paymentStatus"])
        records = [o for o in records if enum_value(o.get("paymentStatus")) == payment_status]

    if not records:
        return 0

    total_value = sum(_price(o) for o in records)
    return round_half_up(total_value / len(records), 2)


def _line_identity(item: Mapping[str, Any]) -> tuple[Any, str]:
    """(id, name) строки заказа; menuItem бывает как id, так и вложенным объектом."""
    menu_item = item.get("menuItem")
    nested = as_record(menu_item)
    if nested is not None:
        item_id = nested.get("id") or nested.get("_id")
        name = item.get("name") or nested.get("name")
    else:
        item_id = menu_item or item.get("id")
        name = item.get("name")
    return item_id, name or "Unknown Item"


def get_popular_items(orders: Any, limit: int | None = None) -> list[PopularItem]:
    """
    Популярные позиции — по суммарному количеству во всех заказах.
    limit по умолчанию берётся из settings.popular_items_limit.
    """
    counts: dict[Any, PopularItem] = {}

    for order in as_records(orders):
        items = order.get("items")
        if not isinstance(items, (list, tuple)):
            continue

        for item in as_records(items):
            item_id, name = _line_identity(item)
            if not isinstance(item_id, Hashable):
                item_id = str(item_id)
            if item_id not in counts:
                counts[item_id] = PopularItem(id=item_id, name=name)

            quantity = item.get("quantity")
            counts[item_id].count += 1
            counts[item_id].total_quantity += quantity if is_number(quantity) else 0

    ranked = sorted(counts.values(), key=lambda p: p.total_quantity, reverse=True)
    if limit is None:
        limit = settings.popular_items_limit
    return ranked[:limit]


def calculate_completion_rate(orders: Any) -> CompletionRate:
    """Доля доставленных и отменённых заказов в процентах."""
    records = as_records(orders)
    if not records:
        return CompletionRate()

    completed = sum(1 for o in records if enum_value(o.get("status")) == OrderStatus.DELIVERED.value)
    cancelled = sum(1 for o in records if enum_value(o.get("status")) == OrderStatus.CANCELLED.value)
    total = len(records)

    return CompletionRate(
        total=total,
        completed=completed,
        cancelled=cancelled,
        completion_rate=round_half_up(completed / total * 100, 2),
        cancellation_rate=round_half_up(cancelled / total * 100, 2),
    )


def get_orders_by_status_groups(orders: Any) -> list[StatusGroup]:
    """Группы заказов по статусу, самая большая — первой."""
    groups: dict[str, StatusGroup] = {}

    for order in as_records(orders):
        status = enum_value(order.get("status")) or "unknown"
        if not isinstance(status, str):
            status = str(status)
        if status not in groups:
            groups[status] = StatusGroup(status=status)
        groups[status].count += 1
        groups[status].orders.append(order)

    return sorted(groups.values(), key=lambda g: g.count, reverse=True)


def calculate_daily_stats(orders: Any) -> dict[str, DailyOrderStats]:
    """
    Статистика по дням (ключ — YYYY-MM-DD из createdAt).

    revenue и delivered_count учитывают только доставленные и оплаченные заказы.
    """
    daily: dict[str, DailyOrderStats] = {}

    for order in as_records(orders):
        day = date_key(order.get("createdAt"))
        if not day:
            continue

        if day not in daily:
            daily[day] = DailyOrderStats(date=day)

        stats = daily[day]
        stats.order_count += 1

        if _is_paid_delivery(order):
            stats.revenue += _price(order)
            stats.delivered_count += 1

        if enum_value(order.get("status")) == OrderStatus.CANCELLED.value:
            stats.cancelled_count += 1

    logger.debug("daily_stats_calculated", extra={"days": len(daily)})

    return daily
