"""Исключения bistro.

Валидаторы возвращают результаты, а не бросают. Эти классы используют только
строгие помощники (ensure_*, apply_*), которые вызываются из HTTP-слоя.
"""
from typing import Any


class BistroError(Exception):
    """Базовое исключение пакета."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidTransitionError(BistroError):
    """Недопустимая смена статуса заказа или брони."""

    def __init__(self, message: str, current: Any = None, new: Any = None) -> None:
        super().__init__(message)
        self.current = current
        self.new = new


class RecordNotFoundError(BistroError):
    """Запись не передана или не найдена в снимке."""

    def __init__(self, message: str, record_id: Any = None) -> None:
        super().__init__(message)
        self.record_id = record_id
