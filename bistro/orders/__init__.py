"""Бизнес-логика заказов: валидация, статусы, фильтры, статистика."""
from bistro.orders.filters import (
    filter_by_order_type,
    filter_by_payment_status,
    filter_by_status,
    filter_by_user,
    filter_orders,
    get_orders_by_date,
    get_recent_orders,
    get_todays_orders,
    search_orders,
    sort_orders,
)
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
from bistro.orders.stats import (
    calculate_average_order_value,
    calculate_completion_rate,
    calculate_daily_stats,
    calculate_order_stats,
    calculate_revenue,
    get_orders_by_status_groups,
    get_popular_items,
)
from bistro.orders.validator import (
    STATUS_TRANSITIONS,
    CancelCheck,
    ModifyCheck,
    TransitionResult,
    ValidationResult,
    can_cancel_order,
    can_modify_order,
    ensure_status_transition,
    sanitize_order_data,
    validate_order_data,
    validate_payment_status_update,
    validate_status_transition,
)
