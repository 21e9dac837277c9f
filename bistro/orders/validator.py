"""
Валидация заказов и машина состояний статуса.

Функции не логируют и не меняют входные данные. Бросает только
ensure_status_transition, остальные возвращают результат проверки.
"""
import copy
from collections.abc import Mapping
from typing import Any

from bistro.exceptions import InvalidTransitionError
from bistro.models import OrderStatus, OrderType, PaymentMethod, PaymentStatus
from bistro.utils import as_record, enum_value, is_blank, is_nan, is_number, to_number
from bistro.validators import CancelCheck, ModifyCheck, TransitionResult, ValidationResult

# Разрешённые переходы статуса. delivered и cancelled терминальные.
STATUS_TRANSITIONS: dict[str, tuple[str, ...]] = {
    OrderStatus.PENDING.value: (OrderStatus.CONFIRMED.value, OrderStatus.CANCELLED.value),
    OrderStatus.CONFIRMED.value: (OrderStatus.PREPARING.value, OrderStatus.CANCELLED.value),
    OrderStatus.PREPARING.value: (OrderStatus.READY.value, OrderStatus.CANCELLED.value),
    OrderStatus.READY.value: (OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value),
    OrderStatus.DELIVERED.value: (),
    OrderStatus.CANCELLED.value: (),
}

PAYMENT_METHODS = tuple(m.value for m in PaymentMethod)
ORDER_TYPES = tuple(t.value for t in OrderType)
PAYMENT_STATUSES = (PaymentStatus.PAID.value, PaymentStatus.PENDING.value)


def _validate_items(items: Any, errors: dict[str, Any]) -> None:
    if not isinstance(items, (list, tuple)):
        errors["items"] = "Items must be an array"
        return
    if len(items) == 0:
        errors["items"] = "At least one item is required"
        return

    item_errors: dict[int, dict[str, str]] = {}
    for index, raw_item in enumerate(items):
        item = as_record(raw_item) or {}
        item_error = {}

        if is_blank(item.get("menuItem")):
            item_error["menuItem"] = "Menu item ID is required"

        quantity = item.get("quantity")
        # "2" из формы считается числом
        if isinstance(quantity, str):
            quantity = to_number(quantity)
        if not is_number(quantity) or is_nan(quantity) or quantity < 1:
            item_error["quantity"] = "Quantity must be at least 1"

        if item_error:
            item_errors[index] = item_error

    if item_errors:
        errors["itemValidation"] = item_errors


def _validate_address(address: Any, errors: dict[str, Any]) -> None:
    address = as_record(address)
    if address is None:
        errors["deliveryAddress"] = "Delivery address is required for delivery orders"
        return

    address_errors = {}
    if is_blank(address.get("street")):
        address_errors["street"] = "Street is required"
    if is_blank(address.get("city")):
        address_errors["city"] = "City is required"
    if is_blank(address.get("zipCode")):
        address_errors["zipCode"] = "Zip code is required"

    if address_errors:
        errors["addressValidation"] = address_errors


def validate_order_data(order_data: Any) -> ValidationResult:
    """
    Проверка данных для создания заказа.

    Returns:
        ValidationResult; errors содержит только упавшие поля
        (itemValidation и addressValidation — вложенные словари).
    """
    data = as_record(order_data) or {}
    errors: dict[str, Any] = {}

    if is_blank(data.get("userId")):
        errors["userId"] = "User ID is required"

    _validate_items(data.get("items"), errors)

    total_price = data.get("totalPrice")
    if total_price is None:
        errors["totalPrice"] = "Total price is required"
    elif not is_number(total_price) or is_nan(total_price):
        errors["totalPrice"] = "Total price must be a number"
    elif total_price < 0:
        errors["totalPrice"] = "Total price cannot be negative"

    if is_blank(data.get("phone")):
        errors["phone"] = "Phone number is required"

    if enum_value(data.get("paymentMethod")) not in PAYMENT_METHODS:
        errors["paymentMethod"] = 'Payment method must be "card" or "cash"'

    order_type = enum_value(data.get("orderType"))
    if order_type not in ORDER_TYPES:
        errors["orderType"] = 'Order type must be "delivery" or "pickup"'

    # Адрес нужен только для доставки
    if order_type == OrderType.DELIVERY.value:
        _validate_address(data.get("deliveryAddress"), errors)

    return ValidationResult(valid=not errors, errors=errors)


def validate_status_transition(current_status: Any, new_status: Any) -> TransitionResult:
    """Проверка перехода статуса по таблице STATUS_TRANSITIONS."""
    current = enum_value(current_status)
    new = enum_value(new_status)

    if not current:
        return TransitionResult(False, "Current status is required")

    if not new:
        return TransitionResult(False, "New status is required")

    allowed = STATUS_TRANSITIONS.get(current) if isinstance(current, str) else None
    if allowed is None:
        return TransitionResult(False, f"Invalid current status: {current}")

    if not allowed:
        return TransitionResult(False, f"Cannot transition from terminal status: {current}")

    if new not in allowed:
        return TransitionResult(
            False,
            f"Invalid transition from {current} to {new}. Allowed: {', '.join(allowed)}",
        )

    return TransitionResult(True)


def ensure_status_transition(current_status: Any, new_status: Any) -> None:
    """То же, что validate_status_transition, но бросает InvalidTransitionError."""
    result = validate_status_transition(current_status, new_status)
    if not result.valid:
        raise InvalidTransitionError(
            result.error or "Invalid transition",
            current=enum_value(current_status),
            new=enum_value(new_status),
        )


def can_cancel_order(order: Any) -> CancelCheck:
    record = as_record(order)
    if record is None:
        return CancelCheck(False, "Order not found")

    status = enum_value(record.get("status"))
    if status == OrderStatus.DELIVERED.value:
        return CancelCheck(False, "Order has already been delivered")
    if status == OrderStatus.CANCELLED.value:
        return CancelCheck(False, "Order is already cancelled")

    return CancelCheck(True)


def can_modify_order(order: Any) -> ModifyCheck:
    """Изменять можно только заказ, который ещё не подтверждён."""
    record = as_record(order)
    if record is None:
        return ModifyCheck(False, "Order not found")

    status = enum_value(record.get("status"))
    if status != OrderStatus.PENDING.value:
        return ModifyCheck(False, f"Cannot modify order with status: {status}")

    return ModifyCheck(True)


def validate_payment_status_update(order: Any, new_payment_status: Any) -> TransitionResult:
    record = as_record(order)
    if record is None:
        return TransitionResult(False, "Order not found")

    new = enum_value(new_payment_status)
    if new not in PAYMENT_STATUSES:
        return TransitionResult(False, f"Invalid payment status: {new}")

    # paid -> pending запрещён
    current = enum_value(record.get("paymentStatus"))
    if current == PaymentStatus.PAID.value and new == PaymentStatus.PENDING.value:
        return TransitionResult(False, "Cannot change payment status from paid to pending")

    return TransitionResult(True)


def _trim_or(value: Any, default: Any) -> Any:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def sanitize_order_data(order_data: Any) -> dict[str, Any]:
    """
    Очистка данных заказа перед отправкой в API.
    Возвращает новый dict, вход не меняется.
    """
    record = as_record(order_data)
    sanitized: dict[str, Any] = copy.deepcopy(dict(record)) if record is not None else {}

    if isinstance(sanitized.get("phone"), str):
        sanitized["phone"] = sanitized["phone"].strip()

    if isinstance(sanitized.get("specialInstructions"), str):
        sanitized["specialInstructions"] = sanitized["specialInstructions"].strip()

    address = as_record(sanitized.get("deliveryAddress"))
    if address is not None:
        sanitized["deliveryAddress"] = {
            "street": _trim_or(address.get("street"), ""),
            "city": _trim_or(address.get("city"), ""),
            "zipCode": _trim_or(address.get("zipCode"), ""),
            "instructions": _trim_or(address.get("instructions"), None),
        }

    if "totalPrice" in sanitized:
        sanitized["totalPrice"] = to_number(sanitized["totalPrice"])

    items = sanitized.get("items")
    if isinstance(items, (list, tuple)):
        clean_items = []
        for raw_item in items:
            item: Mapping[str, Any] = as_record(raw_item) or {}
            clean_items.append({
                "menuItem": item.get("menuItem"),
                "quantity": to_number(item.get("quantity")),
                "specialInstructions": _trim_or(item.get("specialInstructions"), None),
            })
        sanitized["items"] = clean_items

    return sanitized
