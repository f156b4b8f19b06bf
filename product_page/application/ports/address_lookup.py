from __future__ import annotations

from abc import ABC, abstractmethod

from product_page.domain.entities.address import AddressRecord


class AddressLookupPort(ABC):
    @abstractmethod
    async def lookup(self, postal_code: str) -> AddressRecord:
        """
        Resolve an 8-digit postal code.
        A code with no match returns a record with not_found=True.
        Raises AddressLookupUpstreamError / AddressLookupContractError on transport or payload failures.
        """
        raise NotImplementedError
