"""
Фильтрация и поиск броней.

Брони считаются по локальному календарю ресторана: «сегодня» — date.today().
"""
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any

from bistro.models import ReservationStatus
from bistro.utils import as_record, as_records, date_key, enum_value, parse_date, parse_datetime

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def filter_by_status(reservations: Any, status: Any) -> list[Mapping[str, Any]]:
    records = as_records(reservations)
    if not status:
        return records
    status = enum_value(status)
    return [r for r in records if enum_value(r.get("status")) == status]


def filter_by_date(reservations: Any, day: Any) -> list[Mapping[str, Any]]:
    """Брони на день; время в дате брони игнорируется."""
    records = as_records(reservations)
    if not day:
        return records
    key = date_key(day)
    return [r for r in records if r.get("date") and date_key(r.get("date")) == key]


def filter_by_user(reservations: Any, user_id: Any) -> list[Mapping[str, Any]]:
    records = as_records(reservations)
    if not user_id:
        return records

    def belongs(reservation: Mapping[str, Any]) -> bool:
        user = as_record(reservation.get("user")) or {}
        return reservation.get("userId") == user_id or user.get("id") == user_id

    return [r for r in records if belongs(r)]


def get_todays_reservations(reservations: Any, today: date | None = None) -> list[Mapping[str, Any]]:
    if not isinstance(reservations, (list, tuple)):
        return []
    return filter_by_date(reservations, today or date.today())


def _starts_at(reservation: Mapping[str, Any]) -> datetime:
    return parse_datetime(reservation.get("date")) or EPOCH


def get_upcoming_reservations(reservations: Any, today: date | None = None) -> list[Mapping[str, Any]]:
    """Сегодняшние и будущие неотменённые брони, ближайшие первыми."""
    today = today or date.today()
    upcoming = []
    for reservation in as_records(reservations):
        if enum_value(reservation.get("status")) == ReservationStatus.CANCELLED.value:
            continue
        day = parse_date(reservation.get("date"))
        if day is not None and day >= today:
            upcoming.append(reservation)
    return sorted(upcoming, key=_starts_at)


def get_past_reservations(reservations: Any, today: date | None = None) -> list[Mapping[str, Any]]:
    """Брони до сегодняшнего дня, последние первыми."""
    today = today or date.today()
    past = []
    for reservation in as_records(reservations):
        day = parse_date(reservation.get("date"))
        if day is not None and day < today:
            past.append(reservation)
    return sorted(past, key=_starts_at, reverse=True)


def filter_reservations(
    reservations: Any,
    filters: Mapping[str, Any] | None = None,
    today: date | None = None,
) -> list[Mapping[str, Any]]:
    """
    Комбинированный фильтр.

    Args:
        filters: timeRange (today | upcoming | past), status, date, userId
    """
    result = as_records(reservations)
    filters = filters or {}

    time_range = filters.get("timeRange")
    if time_range == "today":
        result = get_todays_reservations(result, today)
    elif time_range == "upcoming":
        result = get_upcoming_reservations(result, today)
    elif time_range == "past":
        result = get_past_reservations(result, today)

    if filters.get("status"):
        result = filter_by_status(result, filters["status"])

    if filters.get("date"):
        result = filter_by_date(result, filters["date"])

    if filters.get("userId"):
        result = filter_by_user(result, filters["userId"])

    return result


def search_reservations(reservations: Any, search_text: Any) -> list[Mapping[str, Any]]:
    """Поиск без учёта регистра по имени, email, телефону и заметкам."""
    records = as_records(reservations)
    if not isinstance(search_text, str) or not search_text.strip():
        return records

    needle = search_text.lower().strip()

    def matches(reservation: Mapping[str, Any]) -> bool:
        for key in ("userName", "userEmail", "phone", "notes"):
            value = reservation.get(key)
            if isinstance(value, str) and needle in value.lower():
                return True
        return False

    return [r for r in records if matches(r)]
