from .base import AuthenticationError, MissingFieldError


class NoAccessTokenError(MissingFieldError, AuthenticationError):
    """Raised when the token endpoint answers without an access token."""

    def __init__(self, message: str = "no access_token in response"):
        super().__init__("access_token", message)


class ConsentFlowError(AuthenticationError):
    """Raised when the installed-app consent flow does not yield a refresh token."""
    pass
