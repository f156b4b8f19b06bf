from abc import ABC, abstractmethod


class SessionStoragePort(ABC):
    """Durable key-value storage scoped to a single session."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_item(self, key: str) -> None:
        raise NotImplementedError
