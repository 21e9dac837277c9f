"""Фильтрация, поиск и сортировка позиций меню."""
from collections.abc import Mapping
from typing import Any

from bistro.utils import as_record, as_records, enum_value, is_number


def is_item_available(item: Any) -> bool:
    """Доступна, если isAvailable не выключен явно и позиция не удалена."""
    record = as_record(item)
    if record is None:
        return False
    return record.get("isAvailable") is not False and not record.get("deleted")


def get_available_items(items: Any) -> list[Mapping[str, Any]]:
    return [item for item in as_records(items) if is_item_available(item)]


def get_popular_items(items: Any) -> list[Mapping[str, Any]]:
    """
    Популярные и доступные позиции.
    Позиции с isPopularOverride (админ убрал из популярного) исключаются.
    """
    return [
        item for item in as_records(items)
        if is_item_available(item) and item.get("isPopular") and not item.get("isPopularOverride")
    ]


def get_suggested_items(items: Any) -> list[Mapping[str, Any]]:
    """Рекомендации ресторана."""
    return [item for item in as_records(items) if is_item_available(item) and item.get("isSuggested")]


def get_items_by_category(items: Any, category: Any) -> list[Mapping[str, Any]]:
    if not category:
        return []
    return [
        item for item in as_records(items)
        if is_item_available(item) and item.get("category") == category
    ]


def get_item_by_id(items: Any, item_id: Any) -> Mapping[str, Any] | None:
    if not item_id:
        return None
    for item in as_records(items):
        if item.get("id") == item_id:
            return item
    return None


def filter_items(items: Any, filters: Mapping[str, Any] | None = None) -> list[Mapping[str, Any]]:
    """
    Комбинированный фильтр.

    Args:
        filters: isAvailable, category, isPopular, cuisine, isPopularOverride, isSuggested.
            Булевы фильтры применяются, только если ключ передан.
    """
    result = as_records(items)
    filters = filters or {}

    if filters.get("isAvailable") is not None:
        wanted = bool(filters["isAvailable"])
        result = [item for item in result if is_item_available(item) == wanted]

    if filters.get("category"):
        result = [item for item in result if item.get("category") == filters["category"]]

    if filters.get("isPopular") is not None:
        result = [item for item in result if item.get("isPopular") == filters["isPopular"]]

    if filters.get("cuisine"):
        cuisine = enum_value(filters["cuisine"])
        result = [item for item in result if enum_value(item.get("cuisine")) == cuisine]

    if filters.get("isPopularOverride") is not None:
        result = [item for item in result if item.get("isPopularOverride") == filters["isPopularOverride"]]

    if filters.get("isSuggested") is not None:
        result = [item for item in result if item.get("isSuggested") == filters["isSuggested"]]

    return result


def search_items(items: Any, search_text: Any) -> list[Mapping[str, Any]]:
    """Поиск по названию, описанию, ингредиентам и категории."""
    records = as_records(items)
    if not isinstance(search_text, str) or not search_text.strip():
        return records

    needle = search_text.lower().strip()

    def matches(item: Mapping[str, Any]) -> bool:
        ingredients = item.get("ingredients")
        if isinstance(ingredients, (list, tuple)):
            ingredients_text = " ".join(str(i) for i in ingredients)
        else:
            ingredients_text = ""
        haystack = (
            str(item.get("name") or ""),
            str(item.get("description") or ""),
            ingredients_text,
            str(item.get("category") or ""),
        )
        return any(needle in value.lower() for value in haystack)

    return [item for item in records if matches(item)]


def _sort_key(sort_by: str):
    if sort_by == "name":
        return lambda item: str(item.get("name") or "")
    if sort_by == "price":
        return lambda item: item.get("price") if is_number(item.get("price")) else 0
    if sort_by == "popularity":
        # популярные первыми
        return lambda item: 0 if item.get("isPopular") else 1
    return None


def sort_items(items: Any, sort_by: str = "name", direction: str = "asc") -> list[Mapping[str, Any]]:
    """Сортировка по name | price | popularity; возвращает новый список."""
    records = as_records(items)
    key = _sort_key(sort_by)
    if key is None:
        return records
    return sorted(records, key=key, reverse=direction == "desc")
