"""Статистика броней для админки. Проценты и средние округляются до 0.1."""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from bistro.config import settings
from bistro.models import ReservationStatus
from bistro.reservations.filters import get_todays_reservations
from bistro.utils import as_records, enum_value, is_finite, is_number, parse_datetime, round_half_up

logger = logging.getLogger(__name__)

# брони, гости которых реально пришли или придут
ACTIVE_STATUSES = (
    ReservationStatus.CONFIRMED.value,
    ReservationStatus.SEATED.value,
    ReservationStatus.COMPLETED.value,
)


@dataclass
class ReservationStats:
    total: int = 0
    confirmed: int = 0
    seated: int = 0
    completed: int = 0
    cancelled: int = 0
    no_show: int = 0
    today_total: int = 0
    today_confirmed: int = 0
    today_seated: int = 0
    total_guests: int = 0
    today_guests: int = 0


@dataclass
class DateRangeStats:
    total: int = 0
    total_guests: int = 0
    average_guests: float = 0
    by_status: dict[str, int] = field(default_factory=dict)


@dataclass
class PeakHour:
    slot: int
    count: int = 0


@dataclass
class TableUtilization:
    utilization_rate: float = 0
    total_slots: int = 0
    used_slots: int = 0
    average_tables_per_slot: float = 0


@dataclass
class CancellationStats:
    cancellation_rate: float = 0
    no_show_rate: float = 0
    completion_rate: float = 0
    total_cancelled: int = 0
    total_no_show: int = 0
    total_completed: int = 0


def _status(reservation: Mapping[str, Any]) -> Any:
    return enum_value(reservation.get("status"))


def _count(reservations: list[Mapping[str, Any]], status: ReservationStatus) -> int:
    return sum(1 for r in reservations if _status(r) == status.value)


def _guests(reservation: Mapping[str, Any]) -> int:
    guests = reservation.get("guests")
    return guests if is_number(guests) else 0


def _percent(part: int, total: int) -> float:
    return round_half_up(part / total * 100, 1) if total else 0


def _in_range(reservations: list[Mapping[str, Any]], start: Any, end: Any) -> list[Mapping[str, Any]]:
    """Брони с датой в [start, end] включительно."""
    start_at = parse_datetime(start)
    end_at = parse_datetime(end)
    if start_at is None or end_at is None:
        return []

    result = []
    for reservation in reservations:
        starts_at = parse_datetime(reservation.get("date"))
        if starts_at is not None and start_at <= starts_at <= end_at:
            result.append(reservation)
    return result


def calculate_reservation_stats(reservations: Any, today: date | None = None) -> ReservationStats:
    """
    Сводка по статусам и гостям, отдельно за сегодня.
    Гости считаются только по активным броням (confirmed, seated, completed).
    """
    if not isinstance(reservations, (list, tuple)):
        return ReservationStats()

    records = as_records(reservations)
    todays = get_todays_reservations(records, today)

    stats = ReservationStats(
        total=len(records),
        confirmed=_count(records, ReservationStatus.CONFIRMED),
        seated=_count(records, ReservationStatus.SEATED),
        completed=_count(records, ReservationStatus.COMPLETED),
        cancelled=_count(records, ReservationStatus.CANCELLED),
        no_show=_count(records, ReservationStatus.NO_SHOW),
        today_total=len(todays),
        today_confirmed=_count(todays, ReservationStatus.CONFIRMED),
        today_seated=_count(todays, ReservationStatus.SEATED),
        total_guests=sum(_guests(r) for r in records if _status(r) in ACTIVE_STATUSES),
        today_guests=sum(_guests(r) for r in todays if _status(r) in ACTIVE_STATUSES),
    )

    logger.debug(
        "reservation_stats_calculated",
        extra={"total": stats.total, "today_total": stats.today_total}
    )

    return stats


def calculate_date_range_stats(reservations: Any, start_date: Any, end_date: Any) -> DateRangeStats:
    if not isinstance(reservations, (list, tuple)) or not start_date or not end_date:
        return DateRangeStats()

    filtered = _in_range(as_records(reservations), start_date, end_date)
    total_guests = sum(_guests(r) for r in filtered)
    average = total_guests / len(filtered) if filtered else 0

    return DateRangeStats(
        total=len(filtered),
        total_guests=total_guests,
        average_guests=round_half_up(average, 1),
        by_status={
            "confirmed": _count(filtered, ReservationStatus.CONFIRMED),
            "seated": _count(filtered, ReservationStatus.SEATED),
            "completed": _count(filtered, ReservationStatus.COMPLETED),
            "cancelled": _count(filtered, ReservationStatus.CANCELLED),
            "noShow": _count(filtered, ReservationStatus.NO_SHOW),
        },
    )


def get_peak_hours(reservations: Any) -> list[PeakHour]:
    """Загрузка по слотам: самые загруженные первыми, при равенстве — по номеру слота."""
    counts: dict[int, int] = {}
    for reservation in as_records(reservations):
        slot = reservation.get("slot")
        if is_finite(slot) and slot:
            slot = int(slot)
            counts[slot] = counts.get(slot, 0) + 1

    ranked = sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))
    return [PeakHour(slot=slot, count=count) for slot, count in ranked]


def calculate_table_utilization(reservations: Any, total_tables: int | None = None) -> TableUtilization:
    """
    Загрузка столов.

    На каждый день с бронями приходится max_time_slot слотов по total_tables
    столов. Занятым считается слот активной брони с назначенными столами.
    """
    if total_tables is None:
        total_tables = settings.total_tables
    if not isinstance(reservations, (list, tuple)) or not total_tables:
        return TableUtilization()

    records = as_records(reservations)
    used_slots = sum(
        1 for r in records
        if r.get("tableNumber") and _status(r) in ACTIVE_STATUSES
    )

    unique_dates = {str(r.get("date")) for r in records}
    total_slots = len(unique_dates) * settings.max_time_slot

    rate = used_slots / (total_slots * total_tables) * 100 if total_slots else 0
    per_slot = used_slots / len(unique_dates) if used_slots else 0

    return TableUtilization(
        utilization_rate=round_half_up(rate, 1),
        total_slots=total_slots,
        used_slots=used_slots,
        average_tables_per_slot=round_half_up(per_slot, 1),
    )


def calculate_cancellation_rate(reservations: Any) -> CancellationStats:
    records = as_records(reservations)
    if not records:
        return CancellationStats()

    total = len(records)
    cancelled = _count(records, ReservationStatus.CANCELLED)
    no_show = _count(records, ReservationStatus.NO_SHOW)
    completed = _count(records, ReservationStatus.COMPLETED)

    return CancellationStats(
        cancellation_rate=_percent(cancelled, total),
        no_show_rate=_percent(no_show, total),
        completion_rate=_percent(completed, total),
        total_cancelled=cancelled,
        total_no_show=no_show,
        total_completed=completed,
    )


def calculate_average_party_size(
    reservations: Any,
    status: Any = None,
    start_date: Any = None,
    end_date: Any = None,
) -> float:
    """Средний размер компании; диапазон дат применяется, только если заданы обе границы."""
    records = as_records(reservations)

    if status:
        status = enum_value(status)
        records = [r for r in records if _status(r) == status]

    if start_date and end_date:
        records = _in_range(records, start_date, end_date)

    if not records:
        return 0

    return round_half_up(sum(_guests(r) for r in records) / len(records), 1)
