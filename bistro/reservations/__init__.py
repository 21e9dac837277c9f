"""Бизнес-логика броней столиков."""
from bistro.reservations.filters import (
    filter_by_date,
    filter_by_status,
    filter_by_user,
    filter_reservations,
    get_past_reservations,
    get_todays_reservations,
    get_upcoming_reservations,
    search_reservations,
)
from bistro.reservations.service import (
    RESERVATION_TRANSITIONS,
    ReservationAnalytics,
    apply_reservation_status_change,
    format_reservation,
    format_reservations,
    get_analytics,
    get_available_status_transitions,
    get_conflicts,
    prepare_reservation_data,
    suggest_tables,
    validate_reservation_status_transition,
)
from bistro.reservations.slots import TIME_SLOTS, get_label_from_slot, get_slot_by_number
from bistro.reservations.stats import (
    CancellationStats,
    DateRangeStats,
    PeakHour,
    ReservationStats,
    TableUtilization,
    calculate_average_party_size,
    calculate_cancellation_rate,
    calculate_date_range_stats,
    calculate_reservation_stats,
    calculate_table_utilization,
    get_peak_hours,
)
from bistro.reservations.validator import (
    ReservationValidation,
    can_cancel_reservation,
    can_modify_reservation,
    validate_guests,
    validate_reservation_data,
    validate_reservation_date,
    validate_time_slot,
)
