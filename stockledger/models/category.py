"""Item categories and suggested display units."""

from enum import Enum


class ItemCategory(str, Enum):
    OPERATION_THEATRE = "Operation Theatre"
    ENDOSCOPY = "Endoscopy"
    GENERAL_SUPPLIES = "General Supplies"
    PHARMACEUTICALS = "Pharmaceuticals"
    CONSUMABLES = "Consumables"
    INSTRUMENTS = "Instruments"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


# Suggestions only; an item's unit is a free display string.
UNIT_OPTIONS = ['pieces', 'box', 'ml', 'mg', 'L', 'kit', 'set', 'roll', 'pair']


def get_category_options() -> list[dict]:
    return [{'value': member.value, 'label': member.value} for member in ItemCategory]
