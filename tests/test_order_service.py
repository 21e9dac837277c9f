"""Unit-тесты для модуля bistro/orders/service.py."""
import copy
import logging

import pytest

from bistro.exceptions import InvalidTransitionError, RecordNotFoundError
from bistro.models import OrderStatus
from bistro.orders.service import (
    apply_status_change,
    calculate_order_total,
    get_active_orders,
    get_order_by_id,
    get_status_display_info,
    is_active,
    is_cancelled,
    is_completed,
)
from tests.conftest import make_order


class TestLookups:

    def test_поиск_по_id(self, sample_orders):
        """Заказ находится по id."""
        assert get_order_by_id(sample_orders, "a3")["status"] == "cancelled"

    def test_нет_такого_id(self, sample_orders):
        """Неизвестный или пустой id даёт None."""
        assert get_order_by_id(sample_orders, "zzz") is None
        assert get_order_by_id(sample_orders, None) is None

    def test_активные_заказы(self, sample_orders):
        """Активные — не доставленные и не отменённые."""
        assert [o["id"] for o in get_active_orders(sample_orders)] == ["a4", "a5"]

    def test_предикаты(self):
        """Предикаты принимают строку, enum и None."""
        assert is_active({"status": "ready"}) is True
        assert is_active({"status": "delivered"}) is False
        assert is_active(None) is False
        assert is_completed({"status": OrderStatus.DELIVERED}) is True
        assert is_cancelled({"status": "cancelled"}) is True
        assert is_cancelled(None) is False

    @pytest.mark.parametrize("status,expected", [
        (OrderStatus.CANCELLED, False),
        ("lost", True),
        (["delivered"], True),
    ])
    def test_активность_по_терминальным_статусам(self, status, expected):
        """Неактивны только статусы с is_terminal, остальное считается активным."""
        assert is_active({"status": status}) is expected


class TestDisplayInfo:

    def test_известный_статус(self):
        """Название и цвет бейджа для известного статуса."""
        assert get_status_display_info("preparing") == {"label": "Preparing", "color": "purple"}

    def test_неизвестный_статус(self):
        """Неизвестный статус показывается как есть, серым."""
        assert get_status_display_info("lost") == {"label": "lost", "color": "gray"}


class TestCalculateOrderTotal:

    def test_сумма_строк(self):
        """Сумма строк — цена на количество."""
        items = [{"price": 12.5, "quantity": 2}, {"price": 3, "quantity": 1}]
        assert calculate_order_total(items) == 28

    def test_мусор_считается_нулём(self):
        """Цена строкой или без цены считается нулём."""
        assert calculate_order_total([{"price": "12", "quantity": 2}, {"quantity": 1}]) == 0
        assert calculate_order_total(None) == 0


class TestApplyStatusChange:
    """Тесты для apply_status_change."""

    def test_возвращает_копию_с_новым_статусом(self):
        """Новый статус в копии, исходный заказ не меняется."""
        order = make_order(status="pending")
        before = copy.deepcopy(order)

        updated = apply_status_change(order, "confirmed")

        assert updated["status"] == "confirmed"
        assert updated["id"] == "o1"
        assert order == before

    def test_логирует_переход(self, bistro_caplog):
        """Успешный переход пишется на INFO."""
        apply_status_change(make_order(status="ready"), OrderStatus.DELIVERED)

        info = [r for r in bistro_caplog.records if r.levelno == logging.INFO]
        assert info[0].action == "ORDER:STATUS"
        assert info[0].getMessage() == "ready → delivered"
        assert info[0].context == {"id": "o1"}

    def test_запрещённый_переход_бросает_и_логирует(self, bistro_caplog):
        """Запрещённый переход бросает InvalidTransitionError и пишется в лог."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            apply_status_change(make_order(status="delivered"), "pending")

        assert exc_info.value.current == "delivered"
        warnings = [r for r in bistro_caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].action == "ORDER:STATUS_REJECTED"
        assert "terminal" in warnings[0].getMessage()

    def test_нет_заказа(self):
        """Без заказа — RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            apply_status_change(None, "confirmed")
