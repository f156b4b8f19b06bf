from __future__ import annotations

import logging

from product_page.application.ports.address_lookup import AddressLookupPort
from product_page.domain.entities.address import AddressRecord


_KNOWN_ADDRESSES: dict[str, AddressRecord] = {
    "01310100": AddressRecord(
        postal_code="01310100",
        street="Avenida Paulista",
        complement="de 612 a 1510 - lado par",
        neighborhood="Bela Vista",
        city="São Paulo",
        state="SP",
    ),
    "20040020": AddressRecord(
        postal_code="20040020",
        street="Avenida Rio Branco",
        neighborhood="Centro",
        city="Rio de Janeiro",
        state="RJ",
    ),
}


class MockAddressLookup(AddressLookupPort):
    def __init__(self, addresses: dict[str, AddressRecord] | None = None) -> None:
        self._addresses = dict(addresses) if addresses is not None else dict(_KNOWN_ADDRESSES)
        self.calls: list[str] = []
        self._logger = logging.getLogger(__name__)

    async def lookup(self, postal_code: str) -> AddressRecord:
        self.calls.append(postal_code)
        self._logger.info("Mock address lookup", extra={"postal_code": postal_code})
        address = self._addresses.get(postal_code)
        if address is None:
            return AddressRecord(postal_code=postal_code, not_found=True)
        return address
