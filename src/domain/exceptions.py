"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Validation and policy rejections are not exceptions: they are returned
as RegistrationRejected results. Only failures of the atomic account
write are raised.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class AccountCreationFailed(RegistrationError):
    """The store rejected the provisioning batch (unique conflict or spent invite)."""

    pass
