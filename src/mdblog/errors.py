"""Exception types shared across parsing, refresh and deploy triggers"""


class ParseError(Exception):
    """A single document could not be turned into a Post."""


class MetadataError(ParseError):
    """Front matter is missing, not a mapping, or fails validation."""


class ContentReadError(OSError):
    """A content file exists but cannot be decoded as UTF-8 text."""


class TriggerError(Exception):
    """A deploy trigger was rejected. Carries the HTTP status and a terse reason."""
    status_code: int = 400
    reason: str = "Bad request"

    def __init__(self, reason: str = None):
        super().__init__(reason or self.reason)
        if reason:
            self.reason = reason


class AuthError(TriggerError):
    status_code = 401
    reason = "Unauthorized"


class MissingSignature(AuthError):
    status_code = 401
    reason = "Missing signature"


class MalformedSignature(AuthError):
    status_code = 400
    reason = "Invalid signature format"


class NoSecretConfigured(AuthError):
    status_code = 503
    reason = "No secret configured"


class SignatureMismatch(AuthError):
    status_code = 401
    reason = "Invalid signature"


class MalformedPayload(TriggerError):
    status_code = 400
    reason = "Invalid payload"


class ShutdownMisuseError(RuntimeError):
    """The shutdown signal was fired after its listener went away."""
