from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from product_page.application.exceptions import SessionStorageError
from product_page.application.ports.session_storage import SessionStoragePort
from product_page.application.utils.quantity import adjust_quantity
from product_page.domain.entities.address import AddressRecord
from product_page.domain.entities.selection_state import SelectionState


DEFAULT_SLOT_KEY = "productPageData"
DEFAULT_TTL = timedelta(minutes=15)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStateCache:
    """
    Holds one session's SelectionState and mirrors every change into a durable slot.

    The slot is read once, by restore(), when the session starts. Each field write
    afterwards produces exactly one save(). Lookup status (error/loading) lives next
    to the state but is never persisted. When stock is given, a snapshot whose quantity
    exceeds it is treated as unreadable.
    """

    def __init__(
        self,
        storage: SessionStoragePort,
        default_state: SelectionState,
        slot_key: str = DEFAULT_SLOT_KEY,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] | None = None,
        stock: int | None = None,
    ) -> None:
        self._storage = storage
        self._stock = stock
        self._default_state = default_state
        self._slot_key = slot_key
        self._ttl = ttl
        self._clock = clock or _utc_now
        self._state = default_state
        self._error: str | None = None
        self._loading = False
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def loading(self) -> bool:
        return self._loading

    def restore(self) -> SelectionState:
        """Rehydrate from the slot if a fresh snapshot exists, otherwise start from defaults."""
        loaded = self.load()
        self._state = loaded if loaded is not None else self._default_state
        return self._state

    def load(self) -> SelectionState | None:
        raw = self._storage.get_item(self._slot_key)
        if raw is None:
            return None

        try:
            state = self._deserialize_state(json.loads(raw))
        except (ValueError, TypeError, KeyError) as e:
            self._logger.warning("Discarding unreadable session snapshot", extra={"reason": str(e)})
            self._clear_slot()
            return None

        age = self._clock() - state.last_persisted_at
        if age >= self._ttl:
            self._logger.info("Discarding expired session snapshot", extra={"reason": f"age={age}"})
            self._clear_slot()
            return None

        return state

    def save(self, state: SelectionState) -> SelectionState:
        """Stamp and write the full state. Storage failures are logged, never raised."""
        stamped = replace(state, last_persisted_at=self._clock())
        payload = json.dumps(self._serialize_state(stamped), ensure_ascii=False)
        try:
            self._storage.set_item(self._slot_key, payload)
        except SessionStorageError as e:
            self._logger.warning("Session snapshot not persisted", extra={"reason": str(e)})
        return stamped

    def select_image(self, image_id: int) -> None:
        self._commit(replace(self._state, main_image_id=image_id))

    def select_size(self, size: str) -> None:
        self._commit(replace(self._state, selected_size=size))

    def select_color(self, color_code: str) -> None:
        self._commit(replace(self._state, selected_color=color_code))

    def set_postal_code(self, postal_code: str) -> None:
        self._commit(replace(self._state, postal_code=postal_code))

    def set_resolved_address(self, address: AddressRecord | None) -> None:
        self._commit(replace(self._state, resolved_address=address))

    def set_quantity(self, delta: int, stock: int) -> bool:
        """Returns False (and writes nothing) when current + delta falls outside [1, stock]."""
        current = self._state.quantity
        updated = adjust_quantity(current, delta, stock)
        if updated == current and delta != 0:
            return False
        self._commit(replace(self._state, quantity=updated))
        return True

    def begin_lookup(self) -> None:
        self._loading = True
        self._error = None

    def finish_lookup(self, error: str | None = None) -> None:
        self._loading = False
        self._error = error

    def fail_validation(self, error: str) -> None:
        self._loading = False
        self._error = error

    def _commit(self, state: SelectionState) -> None:
        self._state = self.save(state)

    def _clear_slot(self) -> None:
        try:
            self._storage.remove_item(self._slot_key)
        except SessionStorageError as e:
            self._logger.warning("Session slot not cleared", extra={"reason": str(e)})

    def _serialize_state(self, state: SelectionState) -> dict[str, Any]:
        return {
            "mainImageId": state.main_image_id,
            "selectedSize": state.selected_size,
            "selectedColor": state.selected_color,
            "quantity": state.quantity,
            "postalCode": state.postal_code,
            "resolvedAddress": self._serialize_address(state.resolved_address),
            "lastPersistedAt": state.last_persisted_at.isoformat() if state.last_persisted_at else None,
        }

    def _deserialize_state(self, data: Any) -> SelectionState:
        if not isinstance(data, dict):
            raise ValueError("snapshot is not an object")

        defaults = self._default_state
        main_image_id = data.get("mainImageId", defaults.main_image_id)
        quantity = data.get("quantity", defaults.quantity)
        for name, value in (("mainImageId", main_image_id), ("quantity", quantity)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer")
        if quantity < 1:
            raise ValueError("quantity must be positive")
        if self._stock is not None and quantity > self._stock:
            raise ValueError(f"quantity {quantity} exceeds stock {self._stock}")

        return SelectionState(
            main_image_id=main_image_id,
            selected_size=_as_str(data.get("selectedSize", defaults.selected_size), "selectedSize"),
            selected_color=_as_str(data.get("selectedColor", defaults.selected_color), "selectedColor"),
            quantity=quantity,
            postal_code=_as_str(data.get("postalCode", defaults.postal_code), "postalCode"),
            resolved_address=self._deserialize_address(data.get("resolvedAddress")),
            last_persisted_at=_parse_timestamp(data["lastPersistedAt"]),
        )

    def _serialize_address(self, address: AddressRecord | None) -> dict[str, Any] | None:
        if address is None:
            return None
        return {
            "postalCode": address.postal_code,
            "street": address.street,
            "complement": address.complement,
            "neighborhood": address.neighborhood,
            "city": address.city,
            "state": address.state,
            "notFound": address.not_found,
        }

    def _deserialize_address(self, data: Any) -> AddressRecord | None:
        if not data:
            return None
        if not isinstance(data, dict):
            raise ValueError("resolvedAddress is not an object")
        return AddressRecord(
            postal_code=_as_str(data["postalCode"], "postalCode"),
            street=_as_optional_str(data.get("street"), "street"),
            complement=_as_optional_str(data.get("complement"), "complement"),
            neighborhood=_as_optional_str(data.get("neighborhood"), "neighborhood"),
            city=_as_optional_str(data.get("city"), "city"),
            state=_as_optional_str(data.get("state"), "state"),
            not_found=_as_bool(data.get("notFound", False), "notFound"),
        )


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value


def _as_optional_str(value: Any, name: str) -> str | None:
    if value is None:
        return None
    return _as_str(value, name)


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean")
    return value


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError("lastPersistedAt must be an ISO-8601 string")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
