"""Flavor domain entity: name, category, allergen values, origin (reference or manual)."""
from enum import Enum
from typing import Dict, Iterable, Optional

from flavorchart.utilities.constants import ALLERGENS


class AllergenValue(str, Enum):
    YES = "Yes"
    NO = "No"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, raw) -> "AllergenValue":
        """Yes/No match case-insensitively after trimming; anything else is Unknown."""
        if isinstance(raw, cls):
            return raw
        t = raw.strip().lower() if isinstance(raw, str) else ""
        if t == "yes":
            return cls.YES
        if t == "no":
            return cls.NO
        return cls.UNKNOWN


class Category(str, Enum):
    ICE_CREAM = "Ice Cream"
    MIX_IN = "Mix-In"
    CAKE = "Cake"
    CONE_OR_BOWL = "Cone/Bowl"
    OTHER = "Other"


# Fixed section order for split exports
CATEGORY_ORDER = (
    Category.ICE_CREAM,
    Category.MIX_IN,
    Category.CAKE,
    Category.CONE_OR_BOWL,
    Category.OTHER,
)

DEFAULT_CATEGORY = Category.MIX_IN


class Origin(str, Enum):
    REFERENCE = "reference"
    MANUAL = "manual"


class Flavor:
    def __init__(self, name: str, category: Category = DEFAULT_CATEGORY,
                 attributes: Optional[Dict[str, AllergenValue]] = None,
                 origin: Origin = Origin.REFERENCE, allergens: Iterable[str] = ALLERGENS):
        self.name = name
        self.category = category
        given = attributes or {}
        # Every configured allergen gets a value
        self.attributes: Dict[str, AllergenValue] = {
            a: AllergenValue.parse(given.get(a)) for a in allergens
        }
        self.origin = origin

    @property
    def is_manual(self) -> bool:
        return self.origin is Origin.MANUAL

    def value_of(self, allergen: str) -> AllergenValue:
        return self.attributes.get(allergen, AllergenValue.UNKNOWN)

    def __str__(self) -> str:
        marks = ", ".join(f"{a}: {v.value}" for a, v in self.attributes.items())
        return f"{self.name} [{self.category.value}] ({self.origin.value}) - {marks}"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Flavor):
            return NotImplemented
        return (self.name, self.category, self.attributes, self.origin) == \
            (other.name, other.category, other.attributes, other.origin)

    def __hash__(self) -> int:
        return hash((self.name, self.origin))

    def to_dict(self):
        '''Converts the Flavor to the persisted manual-item shape.'''
        return {
            "name": self.name,
            "category": self.category.value,
            "attributes": {a: v.value for a, v in self.attributes.items()},
        }

    def to_row(self, allergens: Iterable[str] = ALLERGENS):
        '''Returns the export row: name followed by the allergen labels in order.'''
        return [self.name] + [self.value_of(a).value for a in allergens]
