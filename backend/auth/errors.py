"""Authentication failures.

Every ``AuthError`` is recoverable at the route boundary and reported as a 401.
``public_message`` is what the client sees; malformed, forged and expired
tokens share one message so clients cannot probe how verification failed.
"""


class AuthError(Exception):
    reason = "auth_error"
    public_message = "Unauthorized"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.reason)


class MissingHeader(AuthError):
    reason = "missing_header"
    public_message = "Missing authorization header"


class MalformedToken(AuthError):
    reason = "malformed_token"
    public_message = "Invalid or expired token"


class InvalidSignature(AuthError):
    reason = "invalid_signature"
    public_message = "Invalid or expired token"


class TokenExpired(AuthError):
    reason = "token_expired"
    public_message = "Invalid or expired token"


class UserNotFound(AuthError):
    reason = "user_not_found"
    public_message = "User not found"


class InvalidCredentials(AuthError):
    reason = "invalid_credentials"
    public_message = "Invalid credentials"


class CredentialDerivationError(RuntimeError):
    """The environment could not derive a credential (entropy or KDF failure)."""
