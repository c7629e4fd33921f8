"""
Extraction Models
=================
Typed records the Structured Output demo extracts from free text.

Every field is optional: the model fills what the text mentions and leaves
the rest as None. Numeric fields are range-validated by Pydantic, so an
implausible value (age 200, founded 1700) fails validation instead of being
shown.
"""
from pydantic import BaseModel, Field

NOT_SPECIFIED = "Not specified"


class _Record(BaseModel):
    def has_any_data(self) -> bool:
        return any(
            value is not None and (not isinstance(value, str) or value.strip())
            for value in self.model_dump().values()
        )

    @classmethod
    def field_descriptions(cls) -> dict[str, str]:
        return {name: info.description or "" for name, info in cls.model_fields.items()}


def _show(value) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return NOT_SPECIFIED
    return str(value)


class PersonInfo(_Record):
    name:       str | None = Field(default=None, description="Person's full name")
    age:        int | None = Field(default=None, ge=0, le=150, description="Person's age in years")
    occupation: str | None = Field(default=None, description="Person's job or profession")
    city:       str | None = Field(default=None, description="City where person lives")

    def to_display_dict(self) -> dict[str, str]:
        return {
            "Name":       _show(self.name),
            "Age":        _show(self.age),
            "Occupation": _show(self.occupation),
            "City":       _show(self.city),
        }


class CompanyInfo(_Record):
    name:         str | None = Field(default=None, description="Company name")
    industry:     str | None = Field(default=None, description="Industry or sector")
    founded_year: int | None = Field(default=None, ge=1800, le=2025, description="Year company was founded")
    location:     str | None = Field(default=None, description="Company headquarters location")
    employees:    int | None = Field(default=None, ge=0, description="Number of employees")

    def to_display_dict(self) -> dict[str, str]:
        return {
            "Company Name": _show(self.name),
            "Industry":     _show(self.industry),
            "Founded":      _show(self.founded_year),
            "Location":     _show(self.location),
            "Employees":    _show(self.employees),
        }


class ProductInfo(_Record):
    name:        str | None   = Field(default=None, description="Product name")
    category:    str | None   = Field(default=None, description="Product category")
    price:       float | None = Field(default=None, ge=0, description="Product price")
    brand:       str | None   = Field(default=None, description="Brand or manufacturer")
    description: str | None   = Field(default=None, description="Product description")

    def to_display_dict(self) -> dict[str, str]:
        return {
            "Product Name": _show(self.name),
            "Category":     _show(self.category),
            "Price":        f"${self.price:.2f}" if self.price is not None else NOT_SPECIFIED,
            "Brand":        _show(self.brand),
            "Description":  _show(self.description),
        }


SCHEMAS: dict[str, type[_Record]] = {
    "person":  PersonInfo,
    "company": CompanyInfo,
    "product": ProductInfo,
}
