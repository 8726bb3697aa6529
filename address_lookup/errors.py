"""Exception hierarchy raised by the address lookup client."""

from typing import Any


class AddressLookupError(RuntimeError):
    """Base class for every failure surfaced by the lookup client."""


class LookupApiError(AddressLookupError):
    """Represents failures when communicating with the remote service."""


class EmptyResultError(AddressLookupError):
    """The service answered with an empty item list."""


class RemoteItemError(AddressLookupError):
    """The service reported an error inside the first returned item."""

    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = dict(payload)
        super().__init__(
            f"Address lookup service error {self.code}: {self.description or 'no description provided.'}"
        )

    @property
    def code(self) -> str:
        return str(self.payload.get("Error", ""))

    @property
    def description(self) -> str:
        return str(self.payload.get("Description", ""))

    @property
    def cause(self) -> str:
        return str(self.payload.get("Cause", ""))

    @property
    def resolution(self) -> str:
        return str(self.payload.get("Resolution", ""))


class AggregateResolveError(AddressLookupError):
    """
    One or more containers from a find query could not be resolved.

    ``failures`` maps each failing container id to its exception and
    ``resolved`` keeps the items gathered before the lookup gave up.
    """

    def __init__(
        self,
        failures: dict[str, BaseException],
        resolved: list[Any],
    ) -> None:
        self.failures = failures
        self.resolved = resolved
        ids = ", ".join(failures)
        super().__init__(f"The following containers could not be resolved: {ids}")
