"""Помощники для заказов поверх валидатора: поиск, активность, смена статуса."""
import copy
import logging
from collections.abc import Mapping
from typing import Any

from bistro.exceptions import InvalidTransitionError, RecordNotFoundError
from bistro.logger import log
from bistro.models import OrderStatus
from bistro.orders.validator import validate_status_transition
from bistro.utils import as_record, as_records, enum_value, is_number

logger = logging.getLogger(__name__)


def get_order_by_id(orders: Any, order_id: Any) -> Mapping[str, Any] | None:
    if not order_id:
        return None
    for order in as_records(orders):
        if order.get("id") == order_id:
            return order
    return None


def is_active(order: Any) -> bool:
    """Активный — ещё не доставлен и не отменён."""
    record = as_record(order)
    if record is None:
        return False
    status = enum_value(record.get("status"))
    return not any(s.is_terminal and s.value == status for s in OrderStatus)


def is_completed(order: Any) -> bool:
    record = as_record(order)
    return record is not None and enum_value(record.get("status")) == OrderStatus.DELIVERED.value


def is_cancelled(order: Any) -> bool:
    record = as_record(order)
    return record is not None and enum_value(record.get("status")) == OrderStatus.CANCELLED.value


def get_active_orders(orders: Any) -> list[Mapping[str, Any]]:
    return [o for o in as_records(orders) if is_active(o)]


def get_status_display_info(status: Any) -> dict[str, str]:
    """Подпись и цвет бейджа статуса; для неизвестного — сам статус, серый."""
    value = enum_value(status)
    try:
        known = OrderStatus(value)
    except ValueError:
        return {"label": str(value), "color": "gray"}
    return {"label": known.display_name, "color": known.color}


def calculate_order_total(items: Any) -> float:
    """Сумма price × quantity по строкам (контрольный пересчёт totalPrice)."""
    total = 0
    for item in as_records(items):
        price = item.get("price")
        quantity = item.get("quantity")
        total += (price if is_number(price) else 0) * (quantity if is_number(quantity) else 0)
    return total


def apply_status_change(order: Any, new_status: Any) -> dict[str, Any]:
    """
    Проверяет переход и возвращает копию заказа с новым статусом.

    Raises:
        RecordNotFoundError: заказ не передан
        InvalidTransitionError: переход не разрешён таблицей статусов
    """
    record = as_record(order)
    if record is None:
        raise RecordNotFoundError("Order not found")

    order_id = record.get("id")
    current = enum_value(record.get("status"))
    new = enum_value(new_status)

    result = validate_status_transition(current, new)
    if not result.valid:
        log.transition_rejected("order", order_id, result.error or "")
        raise InvalidTransitionError(result.error or "Invalid transition", current=current, new=new)

    updated = copy.deepcopy(dict(record))
    updated["status"] = new

    log.transition("order", order_id, current, new)
    logger.debug("order_status_applied", extra={"order_id": order_id, "status": new})

    return updated
