from datetime import timedelta
from functools import lru_cache
import logging

from product_page.core.config import settings
from product_page.application.ports.address_lookup import AddressLookupPort
from product_page.application.ports.product_catalog import ProductCatalogPort
from product_page.application.ports.session_storage import SessionStoragePort
from product_page.application.use_cases.resolve_address import AddressResolutionPipeline
from product_page.application.use_cases.session_state_cache import SessionStateCache
from product_page.infrastructure.address.mock_lookup import MockAddressLookup
from product_page.infrastructure.address.viacep_client import ViaCepAddressLookup
from product_page.infrastructure.catalog.product_catalog_store import ProductCatalogStore
from product_page.infrastructure.store.json_storage import JsonFileSessionStorage
from product_page.infrastructure.store.memory_storage import MemorySessionStorage


_memory_storages: dict[str, MemorySessionStorage] = {}
_session_caches: dict[str, SessionStateCache] = {}


@lru_cache
def get_product_catalog() -> ProductCatalogPort:
    return ProductCatalogStore()


@lru_cache
def get_address_lookup() -> AddressLookupPort:
    logger = logging.getLogger(__name__)
    if settings.ADDRESS_LOOKUP_PROVIDER.lower() == "mock" or settings.ENV.lower() == "local":
        logger.info("Using MockAddressLookup (provider=%s, ENV=%s)", settings.ADDRESS_LOOKUP_PROVIDER, settings.ENV)
        return MockAddressLookup()
    return ViaCepAddressLookup()


def get_resolution_pipeline() -> AddressResolutionPipeline:
    return AddressResolutionPipeline(lookup=get_address_lookup())


def get_session_storage(session_id: str) -> SessionStoragePort:
    if settings.SESSION_STORE_PROVIDER.lower() == "json":
        return JsonFileSessionStorage.for_session(settings.SESSION_DATA_DIR, session_id)
    storage = _memory_storages.get(session_id)
    if storage is None:
        storage = MemorySessionStorage()
        _memory_storages[session_id] = storage
    return storage


def get_session_cache(session_id: str) -> SessionStateCache:
    """Return the session's cache, restoring it from durable storage on first access."""
    cache = _session_caches.get(session_id)
    if cache is None:
        catalog = get_product_catalog()
        cache = SessionStateCache(
            storage=get_session_storage(session_id),
            default_state=catalog.default_selection(),
            slot_key=settings.SESSION_SLOT_KEY,
            ttl=timedelta(minutes=settings.SESSION_TTL_MINUTES),
            stock=catalog.get_product().stock,
        )
        cache.restore()
        _session_caches[session_id] = cache
    return cache


def reset_sessions() -> None:
    _session_caches.clear()
    _memory_storages.clear()
