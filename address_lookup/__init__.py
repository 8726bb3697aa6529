"""
Async client for the Capture Interactive address lookup API.

The public surface is the fluent ``AddressLookup`` builder; ``CaptureApiClient``
owns the HTTP session it runs against.
"""

from address_lookup.client import CaptureApiClient
from address_lookup.errors import (
    AddressLookupError,
    AggregateResolveError,
    EmptyResultError,
    LookupApiError,
    RemoteItemError,
)
from address_lookup.lookup import AddressLookup, LookupParams
from address_lookup.models import ResolveItem, RetrieveItem
from address_lookup.variants import CURRENT, LEGACY, ApiVariant, get_variant

__all__ = [
    "AddressLookup",
    "AddressLookupError",
    "AggregateResolveError",
    "ApiVariant",
    "CURRENT",
    "CaptureApiClient",
    "EmptyResultError",
    "LEGACY",
    "LookupApiError",
    "LookupParams",
    "RemoteItemError",
    "ResolveItem",
    "RetrieveItem",
    "get_variant",
]
