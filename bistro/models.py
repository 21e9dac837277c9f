from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OrderStatus(str, Enum):
    PENDING = "pending"         # ожидает подтверждения
    CONFIRMED = "confirmed"     # подтверждён рестораном
    PREPARING = "preparing"     # готовится на кухне
    READY = "ready"             # готов к выдаче / отправке
    DELIVERED = "delivered"     # выдан или доставлен
    CANCELLED = "cancelled"     # отменён

    @property
    def display_name(self) -> str:
        names = {
            "pending": "Pending",
            "confirmed": "Confirmed",
            "preparing": "Preparing",
            "ready": "Ready",
            "delivered": "Delivered",
            "cancelled": "Cancelled",
        }
        return names[self.value]

    @property
    def color(self) -> str:
        colors = {
            "pending": "yellow",
            "confirmed": "blue",
            "preparing": "purple",
            "ready": "green",
            "delivered": "gray",
            "cancelled": "red",
        }
        return colors[self.value]

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, Enum):
    CARD = "card"
    CASH = "cash"


class OrderType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class Cuisine(str, Enum):
    CONTINENTAL = "continental"
    FRENCH = "french"
    ITALIAN = "italian"
    ASIAN = "asian"
    MEDITERRANEAN = "mediterranean"
    AMERICAN = "american"
    MEXICAN = "mexican"
    INDIAN = "indian"
    JAPANESE = "japanese"
    CHINESE = "chinese"
    THAI = "thai"
    OTHER = "other"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"           # гости за столом
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"         # гости не пришли


class Record(BaseModel):
    """
    Базовая запись в формате бэкенда.

    Поля в Python — snake_case, в JSON — camelCase (userId, totalPrice...).
    Неизвестные поля сохраняются, чтобы не терять данные бэкенда.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class DeliveryAddress(Record):
    street: str
    city: str
    zip_code: str
    instructions: str | None = None


class OrderLine(Record):
    menu_item: str
    quantity: int = Field(default=1, ge=1)
    special_instructions: str | None = None
    name: str | None = None
    price: float | None = None


class Order(Record):
    id: str | None = None
    user_id: str
    items: list[OrderLine]
    total_price: float = Field(ge=0)
    phone: str
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.PENDING
    order_type: OrderType
    delivery_address: DeliveryAddress | None = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime | None = None


class MenuItem(Record):
    id: str
    name: str = Field(min_length=2, max_length=100)
    category: str
    price: float = Field(ge=0, le=10000)
    description: str = Field(default="", max_length=500)
    preparation_time: int = Field(default=0, ge=0, le=240)
    ingredients: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    cuisine: Cuisine = Cuisine.CONTINENTAL
    is_available: bool = True
    is_popular: bool = False
    is_popular_override: bool = False  # админ исключил из «популярного»
    is_suggested: bool = False
    deleted: bool = False


class CartItem(Record):
    """Элемент корзины (хранится на клиенте, до оформления заказа)"""
    id: str
    name: str = ""
    price: float
    quantity: int = 1


class Reservation(Record):
    id: str | None = None
    user_id: str | None = None
    date: str  # YYYY-MM-DD
    slot: int
    guests: int
    phone: str | None = None
    notes: str = ""
    table_number: list[int] | None = None
    status: ReservationStatus = ReservationStatus.PENDING
