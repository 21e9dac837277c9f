"""
Фильтрация, поиск и сортировка заказов.

Пустой фильтр = тот же набор заказов. Входной список не меняется.
"""
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any

from bistro.utils import as_record, as_records, date_key, enum_value, is_number, parse_datetime, utc_today

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def filter_by_status(orders: Any, status: Any) -> list[Mapping[str, Any]]:
    records = as_records(orders)
    if not status:
        return records
    status = enum_value(status)
    return [o for o in records if enum_value(o.get("status")) == status]


def filter_by_user(orders: Any, user_id: Any) -> list[Mapping[str, Any]]:
    """Совпадение по userId или по вложенному user.id."""
    records = as_records(orders)
    if not user_id:
        return records

    def belongs(order: Mapping[str, Any]) -> bool:
        user = as_record(order.get("user")) or {}
        return order.get("userId") == user_id or user.get("id") == user_id

    return [o for o in records if belongs(o)]


def filter_by_payment_status(orders: Any, payment_status: Any) -> list[Mapping[str, Any]]:
    records = as_records(orders)
    if not payment_status:
        return records
    payment_status = enum_value(payment_status)
    return [o for o in records if enum_value(o.get("paymentStatus")) == payment_status]


def filter_by_order_type(orders: Any, order_type: Any) -> list[Mapping[str, Any]]:
    records = as_records(orders)
    if not order_type:
        return records
    order_type = enum_value(order_type)
    return [o for o in records if enum_value(o.get("orderType")) == order_type]


def get_orders_by_date(orders: Any, day: Any) -> list[Mapping[str, Any]]:
    """Заказы за день; day — YYYY-MM-DD или date."""
    records = as_records(orders)
    if not day:
        return records
    key = date_key(day)
    return [o for o in records if o.get("createdAt") and date_key(o.get("createdAt")) == key]


def get_todays_orders(orders: Any, today: date | None = None) -> list[Mapping[str, Any]]:
    """Заказы за сегодня (UTC); today можно подставить в тестах."""
    if not isinstance(orders, (list, tuple)):
        return []
    return get_orders_by_date(orders, today or utc_today())


def _created_at(order: Mapping[str, Any]) -> datetime:
    return parse_datetime(order.get("createdAt")) or EPOCH


def get_recent_orders(orders: Any, limit: int = 10) -> list[Mapping[str, Any]]:
    """Последние заказы, новые первыми."""
    records = as_records(orders)
    return sorted(records, key=_created_at, reverse=True)[:limit]


def filter_orders(orders: Any, filters: Mapping[str, Any] | None = None) -> list[Mapping[str, Any]]:
    """
    Комбинированный фильтр.

    Args:
        filters: status, userId, paymentStatus, orderType, date — любые из них
    """
    result = as_records(orders)
    filters = filters or {}

    if filters.get("status"):
        result = filter_by_status(result, filters["status"])

    if filters.get("userId"):
        result = filter_by_user(result, filters["userId"])

    if filters.get("paymentStatus"):
        result = filter_by_payment_status(result, filters["paymentStatus"])

    if filters.get("orderType"):
        result = filter_by_order_type(result, filters["orderType"])

    if filters.get("date"):
        result = get_orders_by_date(result, filters["date"])

    return result


def _lower(value: Any) -> str:
    if value is None:
        return ""
    return str(value).lower()


def search_orders(orders: Any, search_text: Any) -> list[Mapping[str, Any]]:
    """Поиск без учёта регистра по id, имени, email клиента и телефону."""
    records = as_records(orders)
    if not isinstance(search_text, str) or not search_text.strip():
        return records

    needle = search_text.lower().strip()

    def matches(order: Mapping[str, Any]) -> bool:
        user = as_record(order.get("user")) or {}
        haystack = (
            _lower(order.get("id")),
            _lower(user.get("name") or order.get("userName")),
            _lower(user.get("email") or order.get("userEmail")),
            _lower(order.get("phone")),
        )
        return any(needle in value for value in haystack)

    return [o for o in records if matches(o)]


def _sort_key(sort_by: str):
    if sort_by == "date":
        return _created_at
    if sort_by == "price":
        return lambda o: o.get("totalPrice") if is_number(o.get("totalPrice")) else 0
    if sort_by == "status":
        return lambda o: str(enum_value(o.get("status")) or "")
    return None


def sort_orders(orders: Any, sort_by: str = "date", direction: str = "desc") -> list[Mapping[str, Any]]:
    """
    Сортировка по date | price | status.
    Возвращает новый список; при неизвестном sort_by порядок не меняется.
    """
    records = as_records(orders)
    key = _sort_key(sort_by)
    if key is None:
        return records
    return sorted(records, key=key, reverse=direction == "desc")
