class ServiceError(Exception):
    """A read or write against the remote data service failed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(ServiceError):
    """Sign in, sign up or password reset was rejected by the auth service."""


class InvalidAmountError(ValueError):
    """Contribution amount is not a finite positive number."""


class MissingEmailError(ValueError):
    """Password reset was requested without an email address."""


def service_error(exc: Exception, cls=ServiceError) -> ServiceError:
    """Wrap a postgrest/auth exception, keeping the service's own message."""
    message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
    return cls(message)
