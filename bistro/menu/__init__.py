"""Бизнес-логика меню: валидация, фильтры, сверка корзины с меню."""
from bistro.menu.filters import (
    filter_items,
    get_available_items,
    get_item_by_id,
    get_items_by_category,
    get_popular_items,
    get_suggested_items,
    is_item_available,
    search_items,
    sort_items,
)
from bistro.menu.service import (
    CheckoutValidation,
    MenuStats,
    calculate_cart_total,
    enrich_cart_items,
    extract_categories,
    get_available_cart_items,
    get_stats,
    normalize_items,
    validate_cart_for_checkout,
)
from bistro.menu.validator import sanitize_menu_item, validate_menu_item, validate_menu_item_update
