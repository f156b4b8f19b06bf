from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AddressRecord:
    postal_code: str
    street: str | None = None
    complement: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None  # two-letter UF code
    not_found: bool = False
