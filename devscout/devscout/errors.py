"""Exception types raised across devscout."""


class DevscoutError(Exception):
    """Base class for all devscout errors."""


class ConfigError(DevscoutError):
    """A client was built without the credential it needs."""


class BatchValidationError(DevscoutError):
    """Batch request rejected before any processing."""


class ProviderError(DevscoutError):
    """An external provider returned an unusable response."""


class AuthenticationError(ProviderError):
    """The shared LinkedIn session credential was rejected."""

    remediation = (
        "LinkedIn session cookie is expired or revoked. Log in to LinkedIn in a "
        "browser, copy the li_at cookie into LINKEDIN_SESSION_COOKIE and re-run. "
        "Every scrape will fail until this is done."
    )


class EmptyContentError(ProviderError):
    """A scraped page rendered too little text to be a real profile."""


class ExtractionError(DevscoutError):
    """Language-model output did not match the profile contract."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class SinkWriteError(DevscoutError):
    """The authoritative internal store rejected a write."""
