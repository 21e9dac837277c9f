"""Pytest фикстуры для тестов bistro."""
import logging
from typing import Any

import pytest

from bistro.models import CartItem, MenuItem, Order, OrderLine, Reservation


def make_order(**overrides: Any) -> dict[str, Any]:
    """
    Заказ в формате бэкенда (camelCase).

    По умолчанию — валидный заказ на самовывоз, ожидающий подтверждения.
    """
    order = {
        "id": "o1",
        "userId": "u1",
        "items": [{"menuItem": "m1", "quantity": 2}],
        "totalPrice": 25.0,
        "phone": "06 12 34 56 78",
        "paymentMethod": "card",
        "paymentStatus": "pending",
        "orderType": "pickup",
        "status": "pending",
        "createdAt": "2026-02-01T10:00:00Z",
    }
    order.update(overrides)
    return order


def make_menu_item(**overrides: Any) -> dict[str, Any]:
    item = {
        "id": "m1",
        "name": "Croque Monsieur",
        "category": "mains",
        "price": 12.5,
        "description": "Ветчина и сыр на бриоши",
        "ingredients": ["bread", "ham", "cheese"],
        "allergens": ["gluten", "milk"],
        "preparationTime": 15,
        "cuisine": "french",
        "isAvailable": True,
        "isPopular": False,
    }
    item.update(overrides)
    return item


def make_reservation(**overrides: Any) -> dict[str, Any]:
    reservation = {
        "id": "r1",
        "userId": "u1",
        "userName": "Marie Curie",
        "userEmail": "marie@example.fr",
        "date": "2026-03-10",
        "slot": 3,
        "guests": 4,
        "phone": "06 12 34 56 78",
        "notes": "",
        "tableNumber": [5],
        "status": "confirmed",
    }
    reservation.update(overrides)
    return reservation


@pytest.fixture
def sample_menu_items() -> list[dict]:
    """Меню: доступная, выключенная, удалённая, популярная и рекомендованная позиции."""
    return [
        make_menu_item(id="m1", name="Croque Monsieur", category="mains", price=12.5),
        make_menu_item(id="m2", name="Soupe à l'oignon", category="starters", price=8.0, isAvailable=False),
        make_menu_item(id="m3", name="Quiche Lorraine", category="mains", price=11.0, deleted=True),
        make_menu_item(id="m4", name="Crème brûlée", category="desserts", price=7.5, isPopular=True),
        make_menu_item(
            id="m5",
            name="Tarte Tatin",
            category="desserts",
            price=6.0,
            isPopular=True,
            isPopularOverride=True,
            isSuggested=True,
        ),
    ]


@pytest.fixture
def sample_cart() -> list[dict]:
    """Корзина: обычная, выключенная в меню и пропавшая из меню позиции."""
    return [
        {"id": "m1", "name": "Croque Monsieur", "price": 10.0, "quantity": 2},
        {"id": "m2", "name": "Soupe à l'oignon", "price": 8.0, "quantity": 1},
        {"id": "gone", "name": "Ratatouille", "price": 9.0, "quantity": 1},
    ]


@pytest.fixture
def sample_orders() -> list[dict]:
    """Шесть заказов за два дня во всех ключевых состояниях."""
    return [
        make_order(id="a1", status="delivered", paymentStatus="paid", totalPrice=30.0,
                   orderType="delivery", createdAt="2026-02-01T09:00:00Z",
                   deliveryAddress={"street": "1 rue de Rivoli", "city": "Paris", "zipCode": "75001"}),
        make_order(id="a2", status="delivered", paymentStatus="pending", totalPrice=20.0,
                   createdAt="2026-02-01T12:30:00Z"),
        make_order(id="a3", status="cancelled", paymentStatus="pending", totalPrice=15.0,
                   createdAt="2026-02-01T18:00:00Z"),
        make_order(id="a4", status="pending", paymentStatus="pending", totalPrice=12.5,
                   userId="u2", createdAt="2026-02-02T08:15:00Z"),
        make_order(id="a5", status="preparing", paymentStatus="paid", totalPrice=45.0,
                   orderType="delivery", createdAt="2026-02-02T11:00:00Z",
                   deliveryAddress={"street": "5 avenue Foch", "city": "Lyon", "zipCode": "69006"}),
        make_order(id="a6", status="delivered", paymentStatus="paid", totalPrice=10.0,
                   userId="u2", createdAt="2026-02-02T19:45:00Z"),
    ]


@pytest.fixture
def sample_reservations() -> list[dict]:
    return [
        make_reservation(id="r1", date="2026-03-10", slot=3, guests=4, status="confirmed", tableNumber=[5]),
        make_reservation(id="r2", date="2026-03-10", slot=3, guests=2, status="seated", tableNumber=[6],
                         userName="Louis Pasteur", userEmail="louis@example.fr", phone="01 23 45 67 89"),
        make_reservation(id="r3", date="2026-03-10", slot=5, guests=6, status="cancelled", tableNumber=[7]),
        make_reservation(id="r4", date="2026-03-09", slot=1, guests=2, status="completed", tableNumber=[1],
                         notes="Anniversaire"),
        make_reservation(id="r5", date="2026-03-08", slot=3, guests=3, status="no-show", tableNumber=[2]),
        make_reservation(id="r6", date="2026-03-12", slot=9, guests=8, status="pending", userId="u2",
                         tableNumber=None),
    ]


@pytest.fixture
def sample_order_model() -> Order:
    return Order(
        id="o1",
        user_id="u1",
        items=[OrderLine(menu_item="m1", quantity=2)],
        total_price=25.0,
        phone="06 12 34 56 78",
        payment_method="card",
        order_type="pickup",
    )


@pytest.fixture
def sample_menu_item_model() -> MenuItem:
    return MenuItem(id="m1", name="Croque Monsieur", category="mains", price=12.5)


@pytest.fixture
def sample_cart_models() -> list[CartItem]:
    return [CartItem(id="m1", name="Croque Monsieur", price=10.0, quantity=2)]


@pytest.fixture
def sample_reservation_model() -> Reservation:
    return Reservation(id="r1", date="2026-03-10", slot=3, guests=4, phone="06 12 34 56 78")


@pytest.fixture
def bistro_caplog(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """caplog, ловящий DEBUG пакетного логгера."""
    caplog.set_level(logging.DEBUG, logger="bistro")
    return caplog
