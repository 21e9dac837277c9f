"""
Сверка корзины с меню и сводка по меню.

Корзина хранится на клиенте и может устареть: позицию убрали из меню,
выключили или поменяли цену. Здесь корзина «обогащается» текущим
состоянием меню, сама корзина при этом не меняется.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from bistro.config import settings
from bistro.logger import log
from bistro.menu.filters import get_available_items, get_popular_items, is_item_available
from bistro.utils import as_records, is_number, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class CheckoutValidation:
    valid: bool
    error: str | None = None
    unavailable_items: list[dict[str, Any]] = field(default_factory=list)  # [{id, name}]
    missing_items: list[dict[str, Any]] = field(default_factory=list)      # [{id, name}]
    available_count: int = 0
    total_count: int = 0


@dataclass
class MenuStats:
    total: int = 0
    available: int = 0
    unavailable: int = 0
    popular: int = 0
    categories: int = 0
    category_list: list[str] = field(default_factory=list)


def _index_by_id(menu_items: list[Mapping[str, Any]]) -> dict[Any, Mapping[str, Any]]:
    """id -> позиция; при дублях побеждает первая."""
    index: dict[Any, Mapping[str, Any]] = {}
    for item in menu_items:
        item_id = item.get("id")
        try:
            index.setdefault(item_id, item)
        except TypeError:
            continue
    return index


def enrich_cart_items(cart_items: Any, menu_items: Any) -> list[dict[str, Any]]:
    """
    Обогащает строки корзины текущими данными меню.

    К каждой строке добавляются:
        isAvailable  — доступна ли позиция сейчас
        currentPrice — цена из меню (или цена из корзины, если позиции нет)
        stillExists  — есть ли позиция в меню

    Если меню ещё не загружено (пустой список), считаем всё доступным:
    иначе до загрузки меню пользователь увидит ложное «недоступно».
    """
    if not isinstance(cart_items, (list, tuple)) or not isinstance(menu_items, (list, tuple)):
        return []

    menu = as_records(menu_items)
    menu_is_loaded = len(menu) > 0
    index = _index_by_id(menu)

    enriched = []
    for cart_item in as_records(cart_items):
        try:
            menu_item = index.get(cart_item.get("id"))
        except TypeError:
            menu_item = None

        if menu_item is not None:
            line = {
                **cart_item,
                "isAvailable": is_item_available(menu_item),
                "currentPrice": menu_item.get("price"),
                "stillExists": True,
            }
        else:
            line = {
                **cart_item,
                "isAvailable": not menu_is_loaded,
                "currentPrice": cart_item.get("price"),
                "stillExists": not menu_is_loaded,
            }
        enriched.append(line)

    logger.debug(
        "cart_enriched",
        extra={"lines": len(enriched), "menu_loaded": menu_is_loaded}
    )

    return enriched


def get_available_cart_items(cart_items: Any, menu_items: Any) -> list[dict[str, Any]]:
    """Только доступные и существующие строки корзины."""
    return [
        item for item in enrich_cart_items(cart_items, menu_items)
        if item["isAvailable"] and item["stillExists"]
    ]


def calculate_cart_total(cart_items: Any, menu_items: Any, available_only: bool = False) -> float:
    """Сумма корзины по актуальным ценам меню, округлённая до копеек."""
    if not isinstance(cart_items, (list, tuple)):
        return 0

    if available_only:
        lines = get_available_cart_items(cart_items, menu_items)
    else:
        lines = enrich_cart_items(cart_items, menu_items)

    total = 0
    for line in lines:
        price = line.get("currentPrice")
        quantity = line.get("quantity")
        if is_number(price) and is_number(quantity):
            total += price * quantity

    return round_half_up(total, 2)


def validate_cart_for_checkout(cart_items: Any, menu_items: Any) -> CheckoutValidation:
    """
    Можно ли оформить корзину.

    Недоступные и пропавшие позиции возвращаются списками — что с ними
    делать (предложить удалить и т.п.), решает вызывающий код.
    """
    if not isinstance(cart_items, (list, tuple)) or len(cart_items) == 0:
        return CheckoutValidation(valid=False, error="Cart is empty")

    enriched = enrich_cart_items(cart_items, menu_items)
    unavailable = [i for i in enriched if not i["isAvailable"] and i["stillExists"]]
    missing = [i for i in enriched if not i["stillExists"]]
    available_count = sum(1 for i in enriched if i["isAvailable"] and i["stillExists"])

    valid = not unavailable and not missing
    result = CheckoutValidation(
        valid=valid,
        error=None if valid else "Some items are unavailable or no longer exist",
        unavailable_items=[{"id": i.get("id"), "name": i.get("name")} for i in unavailable],
        missing_items=[{"id": i.get("id"), "name": i.get("name")} for i in missing],
        available_count=available_count,
        total_count=len(enriched),
    )

    if not valid:
        log.checkout_blocked(
            unavailable=len(unavailable),
            missing=len(missing),
            total=len(enriched),
        )

    return result


def normalize_items(raw_items: Any) -> list[dict[str, Any]]:
    """
    Приводит позиции меню из API к полному виду.

    Недостающие поля заполняются значениями по умолчанию, флаги приводятся
    к bool. Позиция без isAvailable считается недоступной.
    """
    normalized = []
    for item in as_records(raw_items):
        normalized.append({
            **item,
            "allergens": item.get("allergens") or [],
            "ingredients": item.get("ingredients") or [],
            "preparationTime": item.get("preparationTime") or 0,
            "cuisine": item.get("cuisine") or settings.default_cuisine,
            "isAvailable": bool(item.get("isAvailable")),
            "isPopular": bool(item.get("isPopular")),
            "isPopularOverride": bool(item.get("isPopularOverride")),
            "isSuggested": bool(item.get("isSuggested")),
            "deleted": bool(item.get("deleted")),
        })
    return normalized


def extract_categories(items: Any) -> list[str]:
    """Уникальные категории в порядке появления."""
    categories: list[str] = []
    for item in as_records(items):
        category = item.get("category")
        if category and category not in categories:
            categories.append(category)
    return categories


def get_stats(items: Any) -> MenuStats:
    if not isinstance(items, (list, tuple)):
        return MenuStats()

    records = as_records(items)
    available = get_available_items(records)
    popular = get_popular_items(records)
    categories = extract_categories(records)

    return MenuStats(
        total=len(records),
        available=len(available),
        unavailable=len(records) - len(available),
        popular=len(popular),
        categories=len(categories),
        category_list=categories,
    )
