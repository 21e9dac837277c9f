"""
Валидация позиций меню (админский CRUD).

Чистые функции: не логируют, не бросают, входные данные не меняют.
"""
import copy
from typing import Any

from bistro.models import Cuisine
from bistro.validators import ValidationResult
from bistro.utils import as_record, enum_value, is_nan, to_number

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
PRICE_MAX = 10000
PREPARATION_TIME_MAX = 240  # минут

CUISINES = tuple(c.value for c in Cuisine)
CUISINE_ERROR = f"Cuisine must be one of: {', '.join(CUISINES)}"


def _name_length_error(name: str) -> str | None:
    if len(name) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters"
    if len(name) > NAME_MAX_LENGTH:
        return f"Name must not exceed {NAME_MAX_LENGTH} characters"
    return None


def _price_error(value: Any) -> str | None:
    price = to_number(value)
    if is_nan(price):
        return "Price must be a valid number"
    if price < 0:
        return "Price cannot be negative"
    if price > PRICE_MAX:
        return f"Price seems unreasonably high (max: {PRICE_MAX})"
    return None


def _preparation_time_error(value: Any) -> str | None:
    minutes = to_number(value)
    if is_nan(minutes):
        return "Preparation time must be a valid number"
    if minutes < 0:
        return "Preparation time cannot be negative"
    if minutes > PREPARATION_TIME_MAX:
        return f"Preparation time seems too long (max: {PREPARATION_TIME_MAX} minutes)"
    return None


def _description_too_long(value: Any) -> bool:
    return isinstance(value, str) and len(value) > DESCRIPTION_MAX_LENGTH


def _check_optional_fields(data: dict[str, Any], errors: dict[str, str]) -> None:
    """Массивы, кухня и флаги — общие правила для создания и обновления."""
    if "ingredients" in data and data["ingredients"] is not None and not isinstance(data["ingredients"], (list, tuple)):
        errors["ingredients"] = "Ingredients must be an array"

    if "allergens" in data and data["allergens"] is not None and not isinstance(data["allergens"], (list, tuple)):
        errors["allergens"] = "Allergens must be an array"

    if "isAvailable" in data and not isinstance(data["isAvailable"], bool):
        errors["isAvailable"] = "isAvailable must be a boolean"

    if "isPopular" in data and not isinstance(data["isPopular"], bool):
        errors["isPopular"] = "isPopular must be a boolean"


def validate_menu_item(item_data: Any) -> ValidationResult:
    """Проверка новой позиции меню: name, category, price обязательны."""
    data = dict(as_record(item_data) or {})
    errors: dict[str, str] = {}

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        errors["name"] = "Name is required"
    else:
        error = _name_length_error(name)
        if error:
            errors["name"] = error

    category = data.get("category")
    if not isinstance(category, str) or not category.strip():
        errors["category"] = "Category is required"

    price = data.get("price")
    if price is None or price == "":
        errors["price"] = "Price is required"
    else:
        error = _price_error(price)
        if error:
            errors["price"] = error

    if _description_too_long(data.get("description")):
        errors["description"] = f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters"

    preparation_time = data.get("preparationTime")
    if preparation_time is not None and preparation_time != "":
        error = _preparation_time_error(preparation_time)
        if error:
            errors["preparationTime"] = error

    # пустая кухня не проверяется, подставится continental
    cuisine = enum_value(data.get("cuisine"))
    if cuisine and cuisine not in CUISINES:
        errors["cuisine"] = CUISINE_ERROR

    _check_optional_fields(data, errors)

    return ValidationResult(valid=not errors, errors=errors)


def validate_menu_item_update(item_data: Any) -> ValidationResult:
    """
    Проверка частичного обновления.
    Проверяются только переданные поля; обязательных полей нет.
    """
    data = dict(as_record(item_data) or {})
    errors: dict[str, str] = {}

    if "name" in data:
        name = data["name"]
        if not isinstance(name, str) or not name.strip():
            errors["name"] = "Name cannot be empty"
        else:
            error = _name_length_error(name)
            if error:
                errors["name"] = error

    if "price" in data:
        error = _price_error(data["price"])
        if error:
            errors["price"] = error

    if "description" in data and _description_too_long(data["description"]):
        errors["description"] = f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters"

    if "preparationTime" in data:
        error = _preparation_time_error(data["preparationTime"])
        if error:
            errors["preparationTime"] = error

    if "cuisine" in data and enum_value(data["cuisine"]) not in CUISINES:
        errors["cuisine"] = CUISINE_ERROR

    _check_optional_fields(data, errors)

    return ValidationResult(valid=not errors, errors=errors)


def _clean_strings(values: list[Any]) -> list[str]:
    """Обрезает пробелы и выкидывает пустые значения."""
    cleaned = []
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if text:
            cleaned.append(text)
    return cleaned


def sanitize_menu_item(item_data: Any) -> dict[str, Any]:
    """
    Очистка позиции меню перед отправкой в API.
    Возвращает новый dict, вход не меняется.
    """
    record = as_record(item_data)
    sanitized: dict[str, Any] = copy.deepcopy(dict(record)) if record is not None else {}

    for key in ("name", "description", "category"):
        if isinstance(sanitized.get(key), str):
            sanitized[key] = sanitized[key].strip()

    for key in ("price", "preparationTime"):
        if sanitized.get(key) is not None:
            sanitized[key] = to_number(sanitized[key])

    for key in ("ingredients", "allergens"):
        if key not in sanitized or sanitized[key] is None:
            continue
        if isinstance(sanitized[key], (list, tuple)):
            sanitized[key] = _clean_strings(sanitized[key])
        else:
            sanitized[key] = []

    for key in ("isAvailable", "isPopular"):
        if key in sanitized:
            sanitized[key] = bool(sanitized[key])

    return sanitized
