"""Общие помощники: приведение записей, чисел и дат."""
import calendar
import math
from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel


def as_record(obj: Any) -> Mapping[str, Any] | None:
    """
    Приводит запись к dict-like виду с camelCase ключами.
    Pydantic-модели дампятся по алиасам, всё остальное кроме Mapping — None.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(by_alias=True)
    if isinstance(obj, Mapping):
        return obj
    return None


def as_records(items: Any) -> list[Mapping[str, Any]]:
    """Список записей; не-список превращается в [], мусорные элементы отбрасываются."""
    if not isinstance(items, (list, tuple)):
        return []
    records = []
    for item in items:
        record = as_record(item)
        if record is not None:
            records.append(record)
    return records


def enum_value(value: Any) -> Any:
    """OrderStatus.PENDING -> 'pending', остальное без изменений."""
    if isinstance(value, Enum):
        return value.value
    return value


def is_blank(value: Any) -> bool:
    """Пусто ли значение для обязательного поля (None, '', '   ', 0)."""
    if isinstance(value, str):
        return value.strip() == ""
    return not value


def is_number(value: Any) -> bool:
    """bool — не число, хоть и наследует int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> float | int:
    """
    Приводит значение к числу так же, как это делает фронтенд.

    None и '' -> 0, строки парсятся, всё нераспознанное -> nan
    (валидаторы потом отклонят nan как «не число»).
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def is_finite(value: Any) -> bool:
    """Число, но не nan и не бесконечность."""
    return is_number(value) and not (isinstance(value, float) and not math.isfinite(value))


def round_half_up(value: float, digits: int = 2) -> float:
    """Округление «как в кассе»: 2.675 -> 2.68, а не банковское."""
    try:
        quantum = Decimal(1).scaleb(-digits)
        return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return 0.0


def parse_datetime(value: Any) -> datetime | None:
    """
    ISO-строка / date / datetime -> aware datetime в UTC.
    Наивные значения считаются UTC. Нераспознанное -> None.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_date(value: Any) -> date | None:
    """'2026-02-01' / '2026-02-01T10:00:00Z' / date / datetime -> date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    key = date_key(value)
    if not key:
        return None
    try:
        return date.fromisoformat(key)
    except ValueError:
        return None


def date_key(value: Any) -> str:
    """Дата в формате YYYY-MM-DD; пустая строка, если даты нет."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()[:10]
    if isinstance(value, str):
        return value.split("T")[0]
    return ""


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def add_months(day: date, months: int) -> date:
    """31 января + 1 месяц = 28/29 февраля."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))
