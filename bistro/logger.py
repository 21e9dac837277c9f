"""Модуль структурированного логирования для bistro."""

import json
import logging
import sys
from datetime import datetime
from typing import Any

from bistro.config import settings

LOGGER_NAME = "bistro"


class BistroFormatter(logging.Formatter):
    """Текстовый форматтер: [время] [уровень] [action] сообщение {контекст}."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        action_part = ""
        if getattr(record, "action", None):
            action_part = f" [{record.action}]"

        context_part = ""
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict) and ctx:
            pairs = [f'{k}={repr(v) if isinstance(v, str) else v}' for k, v in ctx.items()]
            context_part = " {" + ", ".join(pairs) + "}"

        message = record.getMessage()
        return f"[{timestamp}] [{level}]{action_part} {message}{context_part}"


class JsonFormatter(logging.Formatter):
    """JSON-строка на запись, для сбора логов в проде."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if getattr(record, "action", None):
            log_obj["action"] = record.action
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            log_obj.update(ctx)
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """
    Настраивает handlers пакетного логгера по settings.

    Вызывается приложением, которое встраивает bistro. Сам пакет при импорте
    ничего не печатает.
    """
    settings.check()

    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root.handlers.clear()

    formatter: logging.Formatter = JsonFormatter() if settings.log_format == "json" else BistroFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if settings.log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)

        # bistro.log: все логи
        main_handler = logging.FileHandler(settings.log_dir / "bistro.log", encoding="utf-8")
        main_handler.setFormatter(formatter)
        root.addHandler(main_handler)

        # errors.log: ERROR+
        error_handler = logging.FileHandler(settings.log_dir / "errors.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root.addHandler(error_handler)


class ServiceLogger:
    """
    Структурированный логгер для сервисного слоя.

    Использование:
        from bistro.logger import log
        log.transition("order", "a1", "pending", "confirmed")
        log.checkout_blocked(unavailable=1, missing=0)
    """

    def __init__(self, name: str = LOGGER_NAME) -> None:
        self._logger = logging.getLogger(name)

    def _log(
        self,
        level: int,
        message: str,
        action: str | None = None,
        **context: Any,
    ) -> None:
        """Базовый метод логирования с контекстом."""
        extra = {
            "action": action,
            "context": context if context else None,
        }
        self._logger.log(level, message, extra=extra)

    def transition(self, entity: str, entity_id: Any, from_status: str, to_status: str) -> None:
        """
        Логирует смену статуса заказа или брони.

        Пример:
            log.transition("order", "a1", "ready", "delivered")
        """
        msg = f"{from_status} → {to_status}"
        self._log(logging.INFO, msg, action=f"{entity.upper()}:STATUS", id=entity_id)

    def transition_rejected(self, entity: str, entity_id: Any, error: str) -> None:
        """Логирует отклонённую смену статуса."""
        self._log(logging.WARNING, error, action=f"{entity.upper()}:STATUS_REJECTED", id=entity_id)

    def checkout_blocked(self, **context: Any) -> None:
        """
        Логирует корзину, которую нельзя оформить.

        Пример:
            log.checkout_blocked(unavailable=1, missing=2, total=5)
        """
        self._log(logging.INFO, "Оформление заблокировано", action="CHECKOUT", **context)

    def error(self, action: str, error: Exception, **context: Any) -> None:
        """
        Логирует ошибку с полным контекстом.

        Пример:
            log.error("apply_status_change", exc, order_id="a1")
        """
        error_name = type(error).__name__
        msg = f"{error_name}: {error}"
        self._log(logging.ERROR, msg, action=action, **context)

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, **context)


log = ServiceLogger()
