"""Unit-тесты для модуля bistro/orders/validator.py."""
import copy

import pytest

from bistro.exceptions import InvalidTransitionError
from bistro.models import OrderStatus
from bistro.orders.validator import (
    STATUS_TRANSITIONS,
    can_cancel_order,
    can_modify_order,
    ensure_status_transition,
    sanitize_order_data,
    validate_order_data,
    validate_payment_status_update,
    validate_status_transition,
)
from tests.conftest import make_order


class TestValidateOrderData:
    """Тесты для validate_order_data."""

    def test_валидный_заказ_на_самовывоз(self):
        """Полный заказ на самовывоз проходит."""
        result = validate_order_data(make_order())

        assert result.valid is True
        assert result.errors == {}

    def test_pydantic_модель_принимается(self, sample_order_model):
        """Модель дампится по алиасам и проверяется как dict."""
        assert validate_order_data(sample_order_model).valid is True

    def test_пустые_данные_ошибки_по_всем_полям(self):
        """Пустой заказ — ошибки по всем обязательным полям."""
        result = validate_order_data({})

        assert result.valid is False
        assert result.errors["userId"] == "User ID is required"
        assert result.errors["items"] == "Items must be an array"
        assert result.errors["totalPrice"] == "Total price is required"
        assert result.errors["phone"] == "Phone number is required"
        assert result.errors["paymentMethod"] == 'Payment method must be "card" or "cash"'
        assert result.errors["orderType"] == 'Order type must be "delivery" or "pickup"'

    def test_none_вместо_данных(self):
        """None проверяется как пустой заказ."""
        result = validate_order_data(None)
        assert result.valid is False
        assert "userId" in result.errors

    def test_пустой_список_позиций(self):
        """Заказ без позиций отклоняется."""
        result = validate_order_data(make_order(items=[]))
        assert result.errors["items"] == "At least one item is required"

    def test_ошибки_позиций_по_индексу(self):
        """Ошибки строк собираются в itemValidation по индексу строки."""
        items = [
            {"menuItem": "m1", "quantity": 1},
            {"menuItem": "", "quantity": 0},
            {"menuItem": "m3", "quantity": "0"},
        ]
        result = validate_order_data(make_order(items=items))

        assert result.valid is False
        assert 0 not in result.errors["itemValidation"]
        assert result.errors["itemValidation"][1] == {
            "menuItem": "Menu item ID is required",
            "quantity": "Quantity must be at least 1",
        }
        assert result.errors["itemValidation"][2] == {"quantity": "Quantity must be at least 1"}

    def test_количество_строкой_приводится_к_числу(self):
        """Количество из формы приходит строкой, "2" проходит, "abc" нет."""
        assert validate_order_data(make_order(items=[{"menuItem": "m1", "quantity": "2"}])).valid is True

        result = validate_order_data(make_order(items=[{"menuItem": "m1", "quantity": "abc"}]))
        assert result.errors["itemValidation"][0] == {"quantity": "Quantity must be at least 1"}

    def test_nan_количество_отклоняется(self):
        """nan в количестве не проходит."""
        result = validate_order_data(make_order(items=[{"menuItem": "m1", "quantity": float("nan")}]))
        assert result.errors["itemValidation"][0]["quantity"] == "Quantity must be at least 1"

    @pytest.mark.parametrize("price,message", [
        ("25", "Total price must be a number"),
        (float("nan"), "Total price must be a number"),
        (-1, "Total price cannot be negative"),
    ])
    def test_некорректная_сумма(self, price, message):
        """Сумма строкой, nan и отрицательная."""
        result = validate_order_data(make_order(totalPrice=price))
        assert result.errors["totalPrice"] == message

    def test_нулевая_сумма_допустима(self):
        """Нулевая сумма допустима."""
        assert validate_order_data(make_order(totalPrice=0)).valid is True

    def test_доставка_без_адреса(self):
        """Доставка без адреса отклоняется."""
        result = validate_order_data(make_order(orderType="delivery"))
        assert result.errors["deliveryAddress"] == "Delivery address is required for delivery orders"

    def test_доставка_с_неполным_адресом(self):
        """Пустой dict — это адрес без полей, а не отсутствие адреса."""
        result = validate_order_data(make_order(orderType="delivery", deliveryAddress={}))

        assert "deliveryAddress" not in result.errors
        assert result.errors["addressValidation"] == {
            "street": "Street is required",
            "city": "City is required",
            "zipCode": "Zip code is required",
        }

    def test_самовывоз_адрес_не_проверяется(self):
        """Для самовывоза адрес не проверяется."""
        result = validate_order_data(make_order(orderType="pickup", deliveryAddress={"street": ""}))
        assert result.valid is True

    def test_пробельный_телефон_считается_пустым(self):
        """Телефон из пробелов считается пустым."""
        result = validate_order_data(make_order(phone="   "))
        assert result.errors == {"phone": "Phone number is required"}


class TestValidateStatusTransition:
    """Тесты для validate_status_transition."""

    @pytest.mark.parametrize("status", [s.value for s in OrderStatus])
    def test_переход_в_тот_же_статус_запрещён(self, status):
        """Переход в тот же статус запрещён."""
        assert validate_status_transition(status, status).valid is False

    @pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
    @pytest.mark.parametrize("target", [s.value for s in OrderStatus])
    def test_из_терминального_статуса_переходов_нет(self, terminal, target):
        """Из delivered и cancelled никуда."""
        result = validate_status_transition(terminal, target)

        assert result.valid is False
        assert "terminal" in result.error

    @pytest.mark.parametrize("current,new", [
        ("pending", "confirmed"),
        ("confirmed", "preparing"),
        ("preparing", "ready"),
        ("ready", "delivered"),
        ("pending", "cancelled"),
        ("ready", "cancelled"),
    ])
    def test_разрешённые_переходы(self, current, new):
        """Каждый переход из таблицы разрешён."""
        result = validate_status_transition(current, new)
        assert result.valid is True
        assert result.error is None

    def test_перепрыгнуть_этап_нельзя(self):
        """Пропустить этап нельзя, в ошибке список разрешённых."""
        result = validate_status_transition("pending", "ready")

        assert result.valid is False
        assert result.error == "Invalid transition from pending to ready. Allowed: confirmed, cancelled"

    def test_принимает_enum(self):
        """Статусы можно передавать enum."""
        assert validate_status_transition(OrderStatus.PENDING, OrderStatus.CONFIRMED).valid is True

    def test_неизвестный_текущий_статус(self):
        """Неизвестный текущий статус."""
        result = validate_status_transition("lost", "pending")
        assert result.error == "Invalid current status: lost"

    def test_пустые_статусы(self):
        """Пустой текущий или новый статус."""
        assert validate_status_transition("", "confirmed").error == "Current status is required"
        assert validate_status_transition("pending", None).error == "New status is required"

    def test_нехешируемый_статус_не_падает(self):
        """Статус списком отклоняется без исключения."""
        assert validate_status_transition(["pending"], "confirmed").valid is False

    def test_таблица_переходов_покрывает_все_статусы(self):
        """В таблице есть каждый статус."""
        assert set(STATUS_TRANSITIONS) == {s.value for s in OrderStatus}


class TestEnsureStatusTransition:

    def test_разрешённый_переход_ничего_не_бросает(self):
        """Разрешённый переход проходит молча."""
        ensure_status_transition("pending", "confirmed")

    def test_запрещённый_переход_бросает(self):
        """Запрещённый переход бросает с текстом ошибки."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            ensure_status_transition("delivered", "pending")

        assert "terminal" in exc_info.value.message
        assert exc_info.value.current == "delivered"
        assert exc_info.value.new == "pending"


class TestCanCancelAndModify:
    """Тесты для can_cancel_order и can_modify_order."""

    def test_доставленный_заказ_нельзя_отменить(self):
        """Доставленный заказ не отменить."""
        result = can_cancel_order({"status": "delivered"})
        assert result.can_cancel is False
        assert result.reason == "Order has already been delivered"

    def test_ожидающий_заказ_можно_отменить(self):
        """Ожидающий заказ можно отменить."""
        assert can_cancel_order({"status": "pending"}).can_cancel is True

    def test_отменённый_заказ_повторно_не_отменить(self):
        """Отменённый заказ повторно не отменить."""
        assert can_cancel_order({"status": "cancelled"}).reason == "Order is already cancelled"

    def test_нет_заказа(self):
        """Без заказа — Order not found."""
        assert can_cancel_order(None).reason == "Order not found"
        assert can_modify_order(None).reason == "Order not found"

    def test_изменять_можно_только_pending(self):
        """Менять можно только неподтверждённый заказ."""
        assert can_modify_order({"status": "pending"}).can_modify is True

        result = can_modify_order({"status": "confirmed"})
        assert result.can_modify is False
        assert result.reason == "Cannot modify order with status: confirmed"


class TestValidatePaymentStatusUpdate:

    def test_paid_обратно_в_pending_нельзя(self):
        """Оплаченный заказ нельзя вернуть в pending."""
        result = validate_payment_status_update({"paymentStatus": "paid"}, "pending")
        assert result.valid is False
        assert result.error == "Cannot change payment status from paid to pending"

    def test_pending_в_paid(self):
        """pending в paid разрешено."""
        assert validate_payment_status_update({"paymentStatus": "pending"}, "paid").valid is True

    def test_неизвестный_статус_оплаты(self):
        """Неизвестный статус оплаты отклоняется."""
        result = validate_payment_status_update({"paymentStatus": "pending"}, "refunded")
        assert result.error == "Invalid payment status: refunded"

    def test_нет_заказа(self):
        """Без заказа — Order not found."""
        assert validate_payment_status_update(None, "paid").error == "Order not found"


class TestSanitizeOrderData:
    """Тесты для sanitize_order_data."""

    def test_вход_не_меняется(self):
        """Очистка возвращает копию, вход не трогается."""
        data = make_order(
            phone="  06 12 34 56 78 ",
            totalPrice="25.5",
            orderType="delivery",
            deliveryAddress={"street": " 1 rue ", "city": "Paris ", "zipCode": " 75001", "instructions": "  "},
            items=[{"menuItem": "m1", "quantity": "2", "specialInstructions": " без лука "}],
        )
        before = copy.deepcopy(data)

        sanitize_order_data(data)

        assert data == before

    def test_строки_обрезаются_числа_приводятся(self):
        """Строки обрезаются, сумма и количество приводятся к числу."""
        data = make_order(
            phone="  06 12 34 56 78 ",
            specialInstructions=" позвонить ",
            totalPrice="25.5",
            items=[{"menuItem": "m1", "quantity": "2", "specialInstructions": " без лука ", "extra": 1}],
        )

        sanitized = sanitize_order_data(data)

        assert sanitized["phone"] == "06 12 34 56 78"
        assert sanitized["specialInstructions"] == "позвонить"
        assert sanitized["totalPrice"] == 25.5
        assert sanitized["items"] == [
            {"menuItem": "m1", "quantity": 2, "specialInstructions": "без лука"},
        ]

    def test_адрес_пересобирается(self):
        """Адрес пересобирается, пустые инструкции становятся None."""
        data = make_order(deliveryAddress={"street": " 1 rue ", "city": "Paris ", "zipCode": " 75001", "instructions": "  "})

        sanitized = sanitize_order_data(data)

        assert sanitized["deliveryAddress"] == {
            "street": "1 rue",
            "city": "Paris",
            "zipCode": "75001",
            "instructions": None,
        }

    def test_мусорная_сумма_становится_nan(self):
        """Нераспознанная сумма становится nan."""
        sanitized = sanitize_order_data(make_order(totalPrice="abc"))
        assert sanitized["totalPrice"] != sanitized["totalPrice"]

    def test_none_даёт_пустой_dict(self):
        """None даёт пустой dict."""
        assert sanitize_order_data(None) == {}
