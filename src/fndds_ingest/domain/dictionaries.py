"""Reference dictionary entries consulted during nutrient merging."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutrientInfo:
    """Canonical metadata for a nutrient number."""

    number: int
    name: str
    unit: str
    tag: str
    category: str


@dataclass(frozen=True)
class DerivationInfo:
    """Code describing how a nutrient value was derived."""

    id: int
    code: str
    description: str
