"""Pydantic models used by the NCM client."""

from .base_models import (
    CREDENTIAL_HEADERS,
    ApiKeys,
    Page,
    PageMeta,
    missing_credential,
)

__all__ = [
    "CREDENTIAL_HEADERS",
    "ApiKeys",
    "Page",
    "PageMeta",
    "missing_credential",
]
