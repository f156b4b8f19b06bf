from __future__ import annotations

import asyncio
import logging
import re

from product_page.application.exceptions import AddressLookupContractError, AddressLookupUpstreamError
from product_page.application.ports.address_lookup import AddressLookupPort
from product_page.application.use_cases.session_state_cache import SessionStateCache
from product_page.domain.entities.lookup import LookupOutcome, LookupStatus


POSTAL_CODE_LENGTH = 8
_DIGITS_RE = re.compile(r"^[0-9]+$")

MALFORMED_POSTAL_CODE = "malformed postal code"
POSTAL_CODE_NOT_FOUND = "postal code not found"
LOOKUP_FAILED = "lookup failed, retry"


def is_valid_postal_code(postal_code: str | None) -> bool:
    if not postal_code or len(postal_code) != POSTAL_CODE_LENGTH:
        return False
    return bool(_DIGITS_RE.match(postal_code))


class AddressResolutionPipeline:
    """
    Turn the session's postal code into a resolved address or an inline error.

    Each submit runs Validating -> Pending -> {Resolved, NotFound, TransportError},
    or stops at Invalid. Nothing is kept between submits; all results land in the
    SessionStateCache.
    """

    def __init__(self, lookup: AddressLookupPort) -> None:
        self._lookup = lookup
        self._logger = logging.getLogger(__name__)

    async def submit(self, cache: SessionStateCache) -> LookupOutcome:
        postal_code = cache.state.postal_code

        if not is_valid_postal_code(postal_code):
            cache.fail_validation(MALFORMED_POSTAL_CODE)
            self._logger.info(
                "Postal code rejected",
                extra={"postal_code": postal_code, "status": LookupStatus.invalid.value},
            )
            return LookupOutcome(status=LookupStatus.invalid, postal_code=postal_code, error=MALFORMED_POSTAL_CODE)

        cache.begin_lookup()
        self._logger.info(
            "Postal code lookup started",
            extra={"postal_code": postal_code, "status": LookupStatus.pending.value},
        )

        try:
            address = await self._lookup.lookup(postal_code)
        except asyncio.CancelledError:
            # cancelled by the caller; loading must not stay on
            cache.finish_lookup(LOOKUP_FAILED)
            raise
        except (AddressLookupUpstreamError, AddressLookupContractError) as e:
            self._logger.warning(
                "Postal code lookup failed",
                extra={"postal_code": postal_code, "status": LookupStatus.transport_error.value, "reason": str(e)},
            )
            return self._transport_error(cache, postal_code)
        except Exception as e:
            self._logger.exception(
                "Unexpected error during postal code lookup",
                extra={"postal_code": postal_code, "status": LookupStatus.transport_error.value, "reason": str(e)},
            )
            return self._transport_error(cache, postal_code)

        if address.not_found:
            cache.set_resolved_address(None)
            cache.finish_lookup(POSTAL_CODE_NOT_FOUND)
            self._logger.info(
                "Postal code not found",
                extra={"postal_code": postal_code, "status": LookupStatus.not_found.value},
            )
            return LookupOutcome(status=LookupStatus.not_found, postal_code=postal_code, error=POSTAL_CODE_NOT_FOUND)

        cache.set_resolved_address(address)
        cache.finish_lookup()
        self._logger.info(
            "Postal code resolved",
            extra={"postal_code": postal_code, "status": LookupStatus.resolved.value},
        )
        return LookupOutcome(status=LookupStatus.resolved, postal_code=postal_code, address=address)

    def _transport_error(self, cache: SessionStateCache, postal_code: str) -> LookupOutcome:
        cache.set_resolved_address(None)
        cache.finish_lookup(LOOKUP_FAILED)
        return LookupOutcome(status=LookupStatus.transport_error, postal_code=postal_code, error=LOOKUP_FAILED)
