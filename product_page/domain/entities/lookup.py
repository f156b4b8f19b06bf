from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from product_page.domain.entities.address import AddressRecord


class LookupStatus(str, Enum):
    idle = "idle"
    validating = "validating"
    pending = "pending"
    resolved = "resolved"
    not_found = "not_found"
    transport_error = "transport_error"
    invalid = "invalid"


@dataclass(frozen=True)
class LookupOutcome:
    """Terminal result of one postal-code submit."""

    status: LookupStatus
    postal_code: str
    address: AddressRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is LookupStatus.resolved
