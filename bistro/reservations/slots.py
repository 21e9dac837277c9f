"""Вечерние слоты бронирования. Номер слота уходит в бэкенд, подпись — в UI."""
from typing import Any

TIME_SLOTS: tuple[dict[str, Any], ...] = (
    {"slot": 1, "label": "18:00"},
    {"slot": 2, "label": "18:30"},
    {"slot": 3, "label": "19:00"},
    {"slot": 4, "label": "19:30"},
    {"slot": 5, "label": "20:00"},
    {"slot": 6, "label": "20:30"},
    {"slot": 7, "label": "21:00"},
    {"slot": 8, "label": "21:30"},
    {"slot": 9, "label": "22:00"},
)


def get_slot_by_number(slot_number: Any) -> dict[str, Any] | None:
    for slot in TIME_SLOTS:
        if slot["slot"] == slot_number:
            return slot
    return None


def get_label_from_slot(slot_number: Any) -> str:
    slot = get_slot_by_number(slot_number)
    return slot["label"] if slot else "N/A"
