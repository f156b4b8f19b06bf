"""
Tests for the address resolution pipeline state machine.
"""

from __future__ import annotations

import asyncio

import pytest

from product_page.application.exceptions import AddressLookupContractError, AddressLookupUpstreamError
from product_page.application.ports.address_lookup import AddressLookupPort
from product_page.application.use_cases.resolve_address import (
    LOOKUP_FAILED,
    MALFORMED_POSTAL_CODE,
    POSTAL_CODE_NOT_FOUND,
    AddressResolutionPipeline,
    is_valid_postal_code,
)
from product_page.application.use_cases.session_state_cache import SessionStateCache
from product_page.domain.entities.address import AddressRecord
from product_page.domain.entities.lookup import LookupStatus
from product_page.domain.entities.selection_state import SelectionState
from product_page.infrastructure.address.mock_lookup import MockAddressLookup
from product_page.infrastructure.store.memory_storage import MemorySessionStorage


PAULISTA = AddressRecord(
    postal_code="01310100",
    street="Avenida Paulista",
    neighborhood="Bela Vista",
    city="São Paulo",
    state="SP",
)
RIO_BRANCO = AddressRecord(
    postal_code="20040020",
    street="Avenida Rio Branco",
    neighborhood="Centro",
    city="Rio de Janeiro",
    state="RJ",
)


class FailingLookup(AddressLookupPort):
    def __init__(self, error: Exception) -> None:
        self._error = error
        self.calls: list[str] = []

    async def lookup(self, postal_code: str) -> AddressRecord:
        self.calls.append(postal_code)
        raise self._error


class ObservingLookup(AddressLookupPort):
    """Records the cache's lookup status while the call is in flight."""

    def __init__(self, cache: SessionStateCache) -> None:
        self._cache = cache
        self.seen: list[tuple[bool, str | None]] = []

    async def lookup(self, postal_code: str) -> AddressRecord:
        self.seen.append((self._cache.loading, self._cache.error))
        return PAULISTA


class GatedLookup(AddressLookupPort):
    def __init__(self, addresses: dict[str, AddressRecord], gates: dict[str, asyncio.Event]) -> None:
        self._addresses = addresses
        self._gates = gates

    async def lookup(self, postal_code: str) -> AddressRecord:
        gate = self._gates.get(postal_code)
        if gate is not None:
            await gate.wait()
        return self._addresses[postal_code]


def _cache(postal_code: str = "") -> SessionStateCache:
    cache = SessionStateCache(storage=MemorySessionStorage(), default_state=SelectionState(main_image_id=1))
    cache.restore()
    if postal_code:
        cache.set_postal_code(postal_code)
    return cache


def test_postal_code_format():
    assert is_valid_postal_code("01310100")
    assert not is_valid_postal_code("1234567")
    assert not is_valid_postal_code("123456789")
    assert not is_valid_postal_code("01310-10")
    assert not is_valid_postal_code("0131010a")
    assert not is_valid_postal_code("")
    assert not is_valid_postal_code(None)


def test_seven_digits_is_invalid_without_calling_service():
    """A 7-digit code stops at Invalid and never reaches the lookup service."""
    lookup = MockAddressLookup()
    cache = _cache("1234567")
    cache.set_resolved_address(PAULISTA)

    outcome = asyncio.run(AddressResolutionPipeline(lookup).submit(cache))

    assert outcome.status is LookupStatus.invalid
    assert outcome.error == MALFORMED_POSTAL_CODE
    assert lookup.calls == []
    assert cache.error == MALFORMED_POSTAL_CODE
    assert cache.loading is False
    # the previous address is left untouched
    assert cache.state.resolved_address == PAULISTA


def test_found_address_is_resolved():
    """A found record lands in the cache and clears any prior error."""
    lookup = MockAddressLookup({"01310100": PAULISTA})
    cache = _cache("01310100")
    cache.finish_lookup(POSTAL_CODE_NOT_FOUND)

    outcome = asyncio.run(AddressResolutionPipeline(lookup).submit(cache))

    assert outcome.status is LookupStatus.resolved
    assert outcome.ok
    assert outcome.address == PAULISTA
    assert cache.state.resolved_address == PAULISTA
    assert cache.error is None
    assert cache.loading is False
    assert lookup.calls == ["01310100"]


def test_not_found_clears_address():
    lookup = MockAddressLookup({"01310100": PAULISTA})
    cache = _cache("00000000")
    cache.set_resolved_address(PAULISTA)

    outcome = asyncio.run(AddressResolutionPipeline(lookup).submit(cache))

    assert outcome.status is LookupStatus.not_found
    assert cache.state.resolved_address is None
    assert cache.error == POSTAL_CODE_NOT_FOUND
    assert cache.loading is False


def test_transport_failure_clears_address_and_loading():
    lookup = FailingLookup(AddressLookupUpstreamError("connection reset"))
    cache = _cache("01310100")
    cache.set_resolved_address(PAULISTA)

    outcome = asyncio.run(AddressResolutionPipeline(lookup).submit(cache))

    assert outcome.status is LookupStatus.transport_error
    assert outcome.error == LOOKUP_FAILED
    assert cache.state.resolved_address is None
    assert cache.error == LOOKUP_FAILED
    assert cache.loading is False
    assert lookup.calls == ["01310100"]


def test_malformed_payload_maps_to_transport_error():
    cache = _cache("01310100")

    outcome = asyncio.run(
        AddressResolutionPipeline(FailingLookup(AddressLookupContractError("not json"))).submit(cache)
    )

    assert outcome.status is LookupStatus.transport_error
    assert cache.error == LOOKUP_FAILED


def test_loading_is_set_and_error_cleared_while_pending():
    cache = _cache("01310100")
    cache.fail_validation(MALFORMED_POSTAL_CODE)
    lookup = ObservingLookup(cache)

    asyncio.run(AddressResolutionPipeline(lookup).submit(cache))

    assert lookup.seen == [(True, None)]
    assert cache.loading is False


def test_resolved_address_is_persisted():
    """The pipeline's write goes through the cache, so the slot holds the address."""
    storage = MemorySessionStorage()
    cache = SessionStateCache(storage=storage, default_state=SelectionState(main_image_id=1))
    cache.set_postal_code("01310100")

    asyncio.run(AddressResolutionPipeline(MockAddressLookup({"01310100": PAULISTA})).submit(cache))

    reloaded = SessionStateCache(storage=storage, default_state=SelectionState(main_image_id=1))
    assert reloaded.restore().resolved_address == PAULISTA


def test_last_response_wins_without_cancellation():
    """Two overlapping lookups both complete; the one finishing last decides the address."""

    async def scenario():
        cache = _cache()
        gate = asyncio.Event()
        lookup = GatedLookup({"01310100": PAULISTA, "20040020": RIO_BRANCO}, {"01310100": gate})
        pipeline = AddressResolutionPipeline(lookup)

        cache.set_postal_code("01310100")
        slow = asyncio.create_task(pipeline.submit(cache))
        await asyncio.sleep(0)

        cache.set_postal_code("20040020")
        fast = await pipeline.submit(cache)
        assert cache.state.resolved_address == RIO_BRANCO

        gate.set()
        slow_outcome = await slow
        return cache, fast, slow_outcome

    cache, fast, slow_outcome = asyncio.run(scenario())

    assert fast.status is LookupStatus.resolved
    assert slow_outcome.status is LookupStatus.resolved
    assert cache.state.resolved_address == PAULISTA
    assert cache.loading is False


def test_unexpected_lookup_error_maps_to_transport_error():
    """A lookup failing with an untyped exception must not leave the session loading."""
    lookup = FailingLookup(RuntimeError("bad base url"))
    cache = _cache("01310100")
    cache.set_resolved_address(PAULISTA)

    outcome = asyncio.run(AddressResolutionPipeline(lookup).submit(cache))

    assert outcome.status is LookupStatus.transport_error
    assert cache.loading is False
    assert cache.error == LOOKUP_FAILED
    assert cache.state.resolved_address is None


def test_cancelled_lookup_clears_loading():
    async def scenario():
        cache = _cache("01310100")
        gate = asyncio.Event()
        pipeline = AddressResolutionPipeline(GatedLookup({"01310100": PAULISTA}, {"01310100": gate}))

        task = asyncio.create_task(pipeline.submit(cache))
        await asyncio.sleep(0)
        assert cache.loading is True

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return cache

    cache = asyncio.run(scenario())

    assert cache.loading is False
    assert cache.error == LOOKUP_FAILED
