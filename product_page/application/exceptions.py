class AddressLookupUpstreamError(RuntimeError):
    """Raised when the address service fails (timeouts, network errors, non-2xx responses)."""
    pass


class AddressLookupContractError(RuntimeError):
    """Raised when the address service answers with a payload we cannot read."""
    pass


class SessionStorageError(RuntimeError):
    """Raised when the durable session slot cannot be written or cleared."""
    pass
