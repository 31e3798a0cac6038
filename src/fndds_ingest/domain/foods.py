"""Aggregate food documents assembled from the survey extracts."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Serving(_Document):
    """Household serving size for a food."""

    nutrient_basis: str = Field(default="g", alias="100UnitNutrientBasis")
    description: str = Field(default="", alias="householdServingUom")
    amount: float = Field(default=0.0, alias="householdServingValue")
    weight: float | None = Field(default=None, alias="weightInGmOrMl")
    state: str | None = Field(default=None, alias="servingState")


class NutrientMeasurement(_Document):
    """Nutrient value per 100 units of a food."""

    nutrient_number: int = Field(alias="nutrientNumber")
    name: str = Field(default="", alias="nutrientName")
    unit: str = ""
    value: float = Field(default=0.0, alias="valuePer100UnitServing")
    derivation: str | None = None


class InputFood(_Document):
    """Constituent food used to build a survey food."""

    seq_no: int = Field(default=0, alias="seqNo")
    description: str = ""
    unit: str = ""
    amount: float = 0.0
    weight: float = 0.0
    sr_code: int = Field(default=0, alias="srCode")
    portion_code: str = Field(default="", alias="portionCode")
    portion_description: str = Field(default="", alias="portionDescription")


class Food(_Document):
    """Merged survey food document keyed by FDC id."""

    fdc_id: str = Field(alias="fdcId")
    description: str = Field(default="", alias="foodDescription")
    source: str = Field(default="", alias="dataSource")
    publication_date: date | None = Field(default=None, alias="publicationDateTime")
    type: str = "FOOD"
    category: str | None = Field(default=None, alias="foodCategory")
    updated_at: datetime | None = Field(default=None, alias="lastChangeDateTime")
    servings: list[Serving] = Field(default_factory=list, alias="servingSizes")
    nutrients: list[NutrientMeasurement] = Field(default_factory=list)
    input_foods: list[InputFood] = Field(default_factory=list, alias="inputFoods")

    def to_document(self) -> dict[str, object]:
        """Return the JSON document stored for this food."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_document(cls, document: dict[str, object]) -> "Food":
        """Build a food from a stored JSON document."""
        return cls.model_validate(document)
