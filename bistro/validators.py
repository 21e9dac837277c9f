"""
Общие валидаторы полей.

Валидаторы полей возвращают FieldCheck(valid, error), error = None при успехе.
Здесь же общие типы результатов для валидаторов заказов, меню и броней.
"""
import re
from dataclasses import dataclass, field
from typing import Any

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# 0X XX XX XX XX или +33 X XX XX XX XX (после удаления пробелов, точек, дефисов)
FRENCH_PHONE_RE = re.compile(r"^0[1-9]\d{8}$")
INTERNATIONAL_PHONE_RE = re.compile(r"^\+33[1-9]\d{8}$")
PHONE_SEPARATORS_RE = re.compile(r"[\s.\-]")


@dataclass(frozen=True)
class FieldCheck:
    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Результат проверки записи: errors — поле -> сообщение, только упавшие поля."""
    valid: bool
    errors: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransitionResult:
    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class CancelCheck:
    can_cancel: bool
    reason: str | None = None


@dataclass(frozen=True)
class ModifyCheck:
    can_modify: bool
    reason: str | None = None


def validate_email(email: Any) -> FieldCheck:
    if not isinstance(email, str) or not email.strip():
        return FieldCheck(False, "Email is required")

    if not EMAIL_RE.match(email.strip()):
        return FieldCheck(False, "Invalid email format")

    return FieldCheck(True)


def validate_phone_french(phone: Any, required: bool = True) -> FieldCheck:
    """
    Проверка французского номера.
    Принимает: 06 12 34 56 78, 06.12.34.56.78, 0612345678, +33 6 12 34 56 78
    """
    if not isinstance(phone, str) or not phone.strip():
        if required:
            return FieldCheck(False, "Phone number is required")
        return FieldCheck(True)

    cleaned = PHONE_SEPARATORS_RE.sub("", phone)

    if not FRENCH_PHONE_RE.match(cleaned) and not INTERNATIONAL_PHONE_RE.match(cleaned):
        return FieldCheck(False, "Invalid phone format (e.g., 06 12 34 56 78)")

    return FieldCheck(True)
