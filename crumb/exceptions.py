class CrumbError(Exception):
    """Base class for all crumb errors."""


class ImproperlyConfigured(CrumbError):
    """Raised when a required component or setting is missing."""


class PayloadTooLarge(CrumbError):
    """
    Raised when a signed cookie value exceeds the size limit.

    Browsers refuse cookies bigger than ~4KB and truncating the value would
    invalidate its signature, so the whole flush is aborted instead.
    """

    def __init__(self, name: str, size: int, limit: int) -> None:
        self.name = name
        self.size = size
        self.limit = limit
        super().__init__(f'Payload too large for cookie "{name}": {size} bytes, limit is {limit} bytes.')
