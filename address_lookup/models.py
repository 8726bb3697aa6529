"""Typed records returned by the find and retrieve endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class ResolveItem(BaseModel):
    """Entry returned by a find or resolve query."""

    model_config = ConfigDict(frozen=True, extra="allow")

    Id: str
    Type: str | None = None
    Text: str = ""
    Highlight: str = ""
    Description: str = ""
    # Legacy v1.00 responses describe the follow-up action instead of a type.
    Next: str | None = None

    @property
    def is_address(self) -> bool:
        if self.Type is not None:
            return self.Type == "Address"
        return self.Next == "Retrieve"


class RetrieveItem(BaseModel):
    """Full address record returned by the retrieve endpoint."""

    model_config = ConfigDict(frozen=True, extra="allow")

    Id: str
    DomesticId: str = ""
    Language: str = ""
    LanguageAlternatives: str = ""
    Department: str = ""
    Company: str = ""
    SubBuilding: str = ""
    BuildingNumber: str = ""
    BuildingName: str = ""
    SecondaryStreet: str = ""
    Street: str = ""
    Block: str = ""
    Neighbourhood: str = ""
    District: str = ""
    City: str = ""
    Line1: str = ""
    Line2: str = ""
    Line3: str = ""
    Line4: str = ""
    Line5: str = ""
    AdminAreaName: str = ""
    AdminAreaCode: str = ""
    Province: str = ""
    ProvinceName: str = ""
    ProvinceCode: str = ""
    PostalCode: str = ""
    CountryName: str = ""
    CountryIso2: str = ""
    CountryIso3: str = ""
    CountryIsoNumber: int | None = None
    SortingNumber1: str = ""
    SortingNumber2: str = ""
    Barcode: str = ""
    POBoxNumber: str = ""
    Label: str = ""
    Type: str = ""
    DataLevel: str = ""

    @field_validator("CountryIsoNumber", mode="before")
    @classmethod
    def _blank_iso_number(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def lines(self) -> list[str]:
        """Populated address lines in display order."""
        return [
            line
            for line in (self.Line1, self.Line2, self.Line3, self.Line4, self.Line5)
            if line
        ]
