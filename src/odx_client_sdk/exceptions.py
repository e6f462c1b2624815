from __future__ import annotations

from dataclasses import dataclass


@dataclass
class OdxError(Exception):
    code: str
    message: str
    details: object | None = None
    trace_id: str | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"{self.code}: {self.message}{trace}"


class RemoteError(OdxError):
    """The remote system answered with an error envelope."""


class RemoteAccessError(RemoteError):
    pass


class RemoteValidationError(RemoteError):
    pass


class RemoteMissingError(RemoteError):
    pass


class TransportError(OdxError):
    """No usable response came back from the gateway."""


class MalformedResponseError(OdxError):
    pass


class PreconditionError(OdxError):
    """Raised before any remote call when an operation cannot start."""


class EmptyCartError(PreconditionError):
    pass


class NoActiveConfigError(PreconditionError):
    pass


class NoOpenSessionError(PreconditionError):
    pass
