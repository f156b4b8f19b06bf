from __future__ import annotations

import logging
from typing import Any

import httpx

from product_page.application.exceptions import AddressLookupContractError, AddressLookupUpstreamError
from product_page.application.ports.address_lookup import AddressLookupPort
from product_page.core.config import settings
from product_page.domain.entities.address import AddressRecord


class ViaCepAddressLookup(AddressLookupPort):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.ADDRESS_LOOKUP_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.ADDRESS_LOOKUP_TIMEOUT_SECONDS
        self._transport = transport
        self._logger = logging.getLogger(__name__)

    async def lookup(self, postal_code: str) -> AddressRecord:
        url = f"{self._base_url}/{postal_code}/json/"
        client_kwargs: dict[str, Any] = {"transport": self._transport}
        if self._timeout is not None:
            client_kwargs["timeout"] = self._timeout

        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                resp = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise AddressLookupUpstreamError(f"ViaCEP request failed: {type(e).__name__}: {e}") from e

        if not resp.is_success:
            self._logger.error(
                "ViaCEP lookup failed",
                extra={"postal_code": postal_code, "status": resp.status_code, "reason": resp.text[:200]},
            )
            raise AddressLookupUpstreamError(f"ViaCEP error {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise AddressLookupContractError("ViaCEP returned invalid JSON") from e

        return parse_viacep_payload(data, postal_code)


def parse_viacep_payload(data: Any, postal_code: str) -> AddressRecord:
    if not isinstance(data, dict):
        raise AddressLookupContractError("ViaCEP payload is not an object")

    # "erro" comes back as true or "true" depending on the API version
    if data.get("erro") in (True, "true"):
        return AddressRecord(postal_code=postal_code, not_found=True)

    cep = data.get("cep")
    if not isinstance(cep, str) or not cep.strip():
        raise AddressLookupContractError("ViaCEP payload has no cep")

    return AddressRecord(
        postal_code=cep.replace("-", "").strip(),
        street=_optional(data.get("logradouro")),
        complement=_optional(data.get("complemento")),
        neighborhood=_optional(data.get("bairro")),
        city=_optional(data.get("localidade")),
        state=_optional(data.get("uf")),
        not_found=False,
    )


def _optional(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None
