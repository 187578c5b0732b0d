"""Error taxonomy shared across hypercast."""


class HypercastError(Exception):
    """Base class for all hypercast errors."""


class ConfigurationError(HypercastError):
    """Bad or missing configuration (credentials, FID, node address).

    Fatal at startup and never retried.
    """


class TransportError(HypercastError):
    """The node could not be reached or refused our credentials.

    Safe for the caller to retry; hypercast itself never does.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RemoteRejectionError(HypercastError):
    """The node validated the request and rejected it.

    Examples: bad signature, unknown target, duplicate reaction.
    Never retried; shown to the user verbatim.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class DecodeError(HypercastError):
    """A callback token could not be decoded."""
