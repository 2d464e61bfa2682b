"""Error kinds raised and reported by the porter workflows."""


class PorterError(Exception):
    """Base class. `message` is what ends up in the user notification."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PorterError):
    """A local precondition failed; no backend was contacted."""


class BusyError(PorterError):
    """The same operation is already in flight for this session."""


class ProviderError(PorterError):
    """Field metadata lookup failed."""


class BackendRejection(PorterError):
    """The import backend refused the whole file (`succeeded=False`)."""


class PartialFailure(PorterError):
    """The import ran but some rows failed."""


class TransportError(PorterError):
    """Network, backend or serialization failure around a backend call."""


class FileReadError(PorterError):
    """The chosen file could not be read."""


class BackendCallError(Exception):
    """Non-2xx or malformed response from the HTTP backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_message(exc: BaseException) -> str:
    """Best human-readable message for an arbitrary exception."""
    msg = getattr(exc, "message", None)
    if isinstance(msg, str) and msg:
        return msg
    return str(exc) or exc.__class__.__name__
