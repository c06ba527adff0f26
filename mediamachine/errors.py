"""
Exceptions raised by the API clients
"""

from .results import ErrorKind


class CatalogError(Exception):
    """Base class for every error the clients raise"""

    kind: ErrorKind = ErrorKind.HTTP

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotConfiguredError(CatalogError):
    """No credential (or discovery key) is available"""

    kind = ErrorKind.NOT_CONFIGURED


class InvalidURLError(CatalogError):
    """The server URL cannot be turned into a request URL"""

    kind = ErrorKind.INVALID_URL


class TransportError(CatalogError):
    """Connectivity, DNS or TLS failure"""

    kind = ErrorKind.TRANSPORT


class AuthenticationError(CatalogError):
    """The status check did not answer 200"""

    kind = ErrorKind.AUTHENTICATION


class HTTPStatusError(CatalogError):
    """The server answered with an unexpected status code"""

    kind = ErrorKind.HTTP


class DecodeError(CatalogError):
    """A response body does not have the expected shape"""

    kind = ErrorKind.DECODE


class UnidentifiedShowError(CatalogError):
    """A show has no external library identifier"""

    kind = ErrorKind.UNIDENTIFIED


class NoRootFolderError(CatalogError):
    """The library service has no root folder configured"""

    kind = ErrorKind.NO_ROOT_FOLDER


class NotFoundError(CatalogError):
    """A season, episode or file the operation needs does not exist"""

    kind = ErrorKind.NOT_FOUND


class SupersededError(CatalogError):
    """A newer change to the same resource replaced this one before it was sent"""

    kind = ErrorKind.SUPERSEDED
