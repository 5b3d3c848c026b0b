class PageGuardError(Exception):
    """Base class for engine errors"""


class InvalidResourceIdentity(PageGuardError, ValueError):
    """
    Raised when a URL cannot be turned into an analyzable resource
    (missing host, non-web scheme, unparsable input).

    No verdict is produced and nothing may be recorded for it.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot analyze '{url}': {reason}")


class NoActiveResource(PageGuardError):
    """Raised when there is no resource to evaluate at all"""

    def __init__(self, message: str = "No active resource to analyze"):
        super().__init__(message)
