"""
Валидация бронирований.

В отличие от заказов, validate_reservation_data возвращает список сообщений:
форма брони показывает их общим блоком, а не под полями.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from bistro.config import settings
from bistro.models import ReservationStatus
from bistro.utils import add_months, as_record, enum_value, is_number, parse_date, parse_datetime
from bistro.validators import CancelCheck, FieldCheck, ModifyCheck, validate_phone_french

CLOSED_STATUSES = (
    ReservationStatus.COMPLETED.value,
    ReservationStatus.CANCELLED.value,
    ReservationStatus.NO_SHOW.value,
)


@dataclass(frozen=True)
class ReservationValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_reservation_date(value: Any, today: date | None = None) -> FieldCheck:
    """Дата не в прошлом и не дальше booking_horizon_months вперёд."""
    if not value:
        return FieldCheck(False, "Date is required")

    today = today or date.today()
    reservation_date = parse_date(value)
    if reservation_date is None:
        return FieldCheck(False, "Invalid date")

    if reservation_date < today:
        return FieldCheck(False, "Cannot book in the past")

    horizon = settings.booking_horizon_months
    if reservation_date > add_months(today, horizon):
        return FieldCheck(False, f"Cannot book more than {horizon} months in advance")

    return FieldCheck(True)


def validate_guests(guests: Any) -> FieldCheck:
    if not is_number(guests) or guests < 1:
        return FieldCheck(False, "At least 1 guest is required")

    max_guests = settings.max_guests_per_reservation
    if guests > max_guests:
        return FieldCheck(False, f"Maximum {max_guests} guests per reservation")

    return FieldCheck(True)


def validate_time_slot(slot: Any) -> FieldCheck:
    if not slot:
        return FieldCheck(False, "Time slot is required")

    if not is_number(slot) or slot < 1 or slot > settings.max_time_slot:
        return FieldCheck(False, "Invalid time slot")

    return FieldCheck(True)


def validate_reservation_data(data: Any, today: date | None = None) -> ReservationValidation:
    """Полная проверка брони: дата, гости, слот, телефон, столы (если переданы)."""
    record = as_record(data) or {}
    errors: list[str] = []

    for check in (
        validate_reservation_date(record.get("date"), today),
        validate_guests(record.get("guests")),
        validate_time_slot(record.get("slot")),
        validate_phone_french(record.get("phone") or record.get("contactPhone"), required=True),
    ):
        if not check.valid and check.error:
            errors.append(check.error)

    if record.get("tableNumber") is not None:
        tables = record["tableNumber"]
        if not isinstance(tables, (list, tuple)) or len(tables) == 0:
            errors.append("At least one table must be selected")

    return ReservationValidation(valid=not errors, errors=errors)


def _is_past(reservation: Any, now: datetime | None) -> bool:
    starts_at = parse_datetime(reservation.get("date"))
    if starts_at is None:
        return False
    return starts_at < (now or datetime.now(timezone.utc))


def can_modify_reservation(reservation: Any, now: datetime | None = None) -> ModifyCheck:
    """Менять можно открытую бронь, время которой ещё не наступило."""
    record = as_record(reservation)
    if record is None:
        return ModifyCheck(False, "Reservation not found")

    status = enum_value(record.get("status"))
    if status in CLOSED_STATUSES:
        return ModifyCheck(False, f"Cannot modify {status} reservations")

    if _is_past(record, now):
        return ModifyCheck(False, "Cannot modify past reservations")

    return ModifyCheck(True)


def can_cancel_reservation(reservation: Any, now: datetime | None = None) -> CancelCheck:
    record = as_record(reservation)
    if record is None:
        return CancelCheck(False, "Reservation not found")

    status = enum_value(record.get("status"))
    if status in CLOSED_STATUSES:
        return CancelCheck(False, f"Cannot cancel {status} reservations")

    if _is_past(record, now):
        return CancelCheck(False, "Cannot cancel past reservations")

    return CancelCheck(True)
