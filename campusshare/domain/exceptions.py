"""Errors raised by messaging use cases."""


class MessagingValidationError(ValueError):
    """The caller supplied an invalid or incomplete request."""


class ResourceNotFoundError(LookupError):
    """The requested resource does not exist or is not visible to the caller."""


__all__ = ["MessagingValidationError", "ResourceNotFoundError"]
