"""Shapes of the two supported Capture Interactive API versions."""

from dataclasses import dataclass
from typing import Any

from address_lookup.errors import LookupApiError


@dataclass(frozen=True, slots=True)
class ApiVariant:
    """URL layout, parameter naming, and response envelope for one API version."""

    name: str
    base_url: str
    version: str
    format: str
    envelope: str | None
    capitalized_params: bool
    always_send_text: bool = False

    def url(self, operation: str) -> str:
        return f"{self.base_url}/{operation}/{self.version}/{self.format}.ws"

    @property
    def find_url(self) -> str:
        return self.url("Find")

    @property
    def retrieve_url(self) -> str:
        return self.url("Retrieve")

    def param_name(self, field_name: str) -> str:
        if self.capitalized_params:
            return field_name[:1].upper() + field_name[1:]
        return field_name.lower()

    def unwrap(self, body: Any) -> list[dict[str, Any]]:
        """Extract the item list from a decoded response body."""
        items = body
        if self.envelope is not None:
            if not isinstance(body, dict) or self.envelope not in body:
                raise LookupApiError(
                    f"Address lookup response is missing the '{self.envelope}' envelope."
                )
            items = body[self.envelope]
        if not isinstance(items, list):
            raise LookupApiError("Address lookup response did not contain an item list.")
        return items


LEGACY = ApiVariant(
    name="legacy",
    base_url="https://services.postcodeanywhere.co.uk/Capture/Interactive",
    version="v1.00",
    format="json",
    envelope=None,
    capitalized_params=False,
)

CURRENT = ApiVariant(
    name="current",
    base_url="https://api.addressy.com/Capture/Interactive",
    version="v1.1",
    format="json3ex",
    envelope="Items",
    capitalized_params=True,
    always_send_text=True,
)

_VARIANTS = {variant.name: variant for variant in (LEGACY, CURRENT)}


def get_variant(name: str) -> ApiVariant:
    """Look up a variant by name (``legacy`` or ``current``)."""
    try:
        return _VARIANTS[name.strip().lower()]
    except KeyError as exc:
        choices = ", ".join(sorted(_VARIANTS))
        raise ValueError(f"Unknown API variant '{name}'. Expected one of: {choices}.") from exc
