"""
Сервисный слой броней: статусы, подготовка данных, конфликты столов,
форматирование для админки и сводная аналитика.
"""
import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from bistro.exceptions import InvalidTransitionError, RecordNotFoundError
from bistro.logger import log
from bistro.models import ReservationStatus
from bistro.reservations.stats import (
    CancellationStats,
    PeakHour,
    ReservationStats,
    TableUtilization,
    calculate_cancellation_rate,
    calculate_reservation_stats,
    calculate_table_utilization,
    get_peak_hours,
)
from bistro.reservations.validator import can_cancel_reservation, can_modify_reservation
from bistro.utils import as_record, as_records, date_key, enum_value, is_finite, is_number, parse_datetime, to_number
from bistro.validators import TransitionResult

logger = logging.getLogger(__name__)

RESERVATION_TRANSITIONS: dict[str, tuple[str, ...]] = {
    ReservationStatus.PENDING.value: (
        ReservationStatus.CONFIRMED.value,
        ReservationStatus.CANCELLED.value,
    ),
    ReservationStatus.CONFIRMED.value: (
        ReservationStatus.SEATED.value,
        ReservationStatus.CANCELLED.value,
        ReservationStatus.NO_SHOW.value,
    ),
    ReservationStatus.SEATED.value: (
        ReservationStatus.COMPLETED.value,
        ReservationStatus.CANCELLED.value,
    ),
    ReservationStatus.COMPLETED.value: (),
    ReservationStatus.CANCELLED.value: (),
    ReservationStatus.NO_SHOW.value: (),
}

# брони, которые держат стол
HOLDING_STATUSES = (ReservationStatus.CONFIRMED.value, ReservationStatus.SEATED.value)


@dataclass
class ReservationAnalytics:
    stats: ReservationStats
    cancellations: CancellationStats
    peak_hours: list[PeakHour] = field(default_factory=list)
    utilization: TableUtilization = field(default_factory=TableUtilization)


def get_available_status_transitions(current_status: Any) -> list[str]:
    status = enum_value(current_status)
    if not isinstance(status, str):
        return []
    return list(RESERVATION_TRANSITIONS.get(status, ()))


def validate_reservation_status_transition(current_status: Any, new_status: Any) -> TransitionResult:
    current = enum_value(current_status)
    new = enum_value(new_status)
    if new not in get_available_status_transitions(current):
        return TransitionResult(False, f"Cannot change status from {current} to {new}")
    return TransitionResult(True)


def apply_reservation_status_change(reservation: Any, new_status: Any) -> dict[str, Any]:
    """
    Проверяет переход и возвращает копию брони с новым статусом.

    Raises:
        RecordNotFoundError: бронь не передана
        InvalidTransitionError: переход не разрешён
    """
    record = as_record(reservation)
    if record is None:
        raise RecordNotFoundError("Reservation not found")

    reservation_id = record.get("id")
    current = enum_value(record.get("status"))
    new = enum_value(new_status)

    result = validate_reservation_status_transition(current, new)
    if not result.valid:
        log.transition_rejected("reservation", reservation_id, result.error or "")
        raise InvalidTransitionError(result.error or "Invalid transition", current=current, new=new)

    updated = copy.deepcopy(dict(record))
    updated["status"] = new

    log.transition("reservation", reservation_id, current, new)

    return updated


def _to_int(value: Any) -> int | None:
    """'4' -> 4, 3.7 -> 3; пустое и нераспознанное -> None."""
    if value is None or value == "":
        return None
    number = to_number(value)
    if not is_finite(number):
        return None
    return int(number)


def _trimmed(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def prepare_reservation_data(data: Any) -> dict[str, Any]:
    """
    Готовит данные формы к отправке в API: обрезает строки, приводит
    slot и guests к int. Столы передаются только если выбраны
    (пользователь их не выбирает, админ выбирает).
    """
    record = as_record(data) or {}

    prepared = {
        "date": _trimmed(record.get("date")),
        "slot": _to_int(record.get("slot")),
        "guests": _to_int(record.get("guests")),
        "phone": _trimmed(record.get("phone")),
        "notes": _trimmed(record.get("notes")) or "",
    }
    if record.get("tableNumber"):
        prepared["tableNumber"] = record["tableNumber"]

    return prepared


def _tables(value: Any) -> set[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return set(value)
    if value is None:
        return set()
    return {value}


def get_conflicts(new_reservation: Any, existing_reservations: Any) -> list[Mapping[str, Any]]:
    """
    Брони, которые занимают те же столы в тот же день и слот.
    Учитываются только подтверждённые и рассаженные брони.
    """
    candidate = as_record(new_reservation)
    if candidate is None or not isinstance(existing_reservations, (list, tuple)):
        return []

    day = date_key(candidate.get("date"))
    slot = candidate.get("slot")
    tables = _tables(candidate.get("tableNumber"))

    return [
        r for r in as_records(existing_reservations)
        if date_key(r.get("date")) == day
        and r.get("slot") == slot
        and enum_value(r.get("status")) in HOLDING_STATUSES
        and tables & _tables(r.get("tableNumber"))
    ]


def suggest_tables(guests: Any, available_tables: Any) -> list[Any]:
    """
    Подбор столов под компанию.

    Сначала ищется самый маленький стол, куда помещаются все. Если такого
    нет, столы набираются от меньших к большим, пока хватает мест.
    """
    if not is_number(guests) or guests <= 0 or not isinstance(available_tables, (list, tuple)):
        return []

    tables = [t for t in as_records(available_tables) if is_number(t.get("capacity"))]
    tables.sort(key=lambda t: t["capacity"])

    for table in tables:
        if table["capacity"] >= guests:
            return [table.get("number")]

    suggested = []
    remaining = guests
    for table in tables:
        if remaining <= 0:
            break
        suggested.append(table.get("number"))
        remaining -= table["capacity"]

    return suggested


def _display_date(value: Any) -> str:
    """'2026-10-19' -> 'Monday, October 19, 2026'."""
    starts_at = parse_datetime(value)
    if starts_at is None:
        return "Invalid Date"
    return f"{starts_at:%A}, {starts_at:%B} {starts_at.day}, {starts_at.year}"


def format_reservation(reservation: Any, now: datetime | None = None) -> dict[str, Any] | None:
    """Бронь плюс вычисляемые поля для отображения в админке."""
    record = as_record(reservation)
    if record is None:
        return None

    now = now or datetime.now(timezone.utc)
    starts_at = parse_datetime(record.get("date"))

    return {
        **record,
        "displayDate": _display_date(record.get("date")),
        "isPast": starts_at is not None and starts_at < now,
        "isCancellable": can_cancel_reservation(record, now).can_cancel,
        "isModifiable": can_modify_reservation(record, now).can_modify,
        "availableTransitions": get_available_status_transitions(record.get("status")),
    }


def format_reservations(reservations: Any, now: datetime | None = None) -> list[dict[str, Any]]:
    return [format_reservation(r, now) for r in as_records(reservations)]


def get_analytics(
    reservations: Any,
    total_tables: int | None = None,
    today: date | None = None,
) -> ReservationAnalytics:
    """Сводка для дашборда: статусы, отмены, пиковые слоты, загрузка столов."""
    analytics = ReservationAnalytics(
        stats=calculate_reservation_stats(reservations, today),
        cancellations=calculate_cancellation_rate(reservations),
        peak_hours=get_peak_hours(reservations),
        utilization=calculate_table_utilization(reservations, total_tables),
    )

    logger.debug(
        "reservation_analytics_built",
        extra={
            "total": analytics.stats.total,
            "utilization_rate": analytics.utilization.utilization_rate,
        }
    )

    return analytics
