"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import RegistrationState
from app.domain.exceptions import (
    AuthenticationException,
    IdentityServiceException,
    PhoneAlreadyBoundException,
    PhoneNotVerifiedException,
    ResourceNotFoundException,
    SmsDeliveryFailedException,
    SqlNotConfiguredException,
    UpstreamServiceException,
    ValidationException,
)

__all__ = [
    # Enums
    "RegistrationState",
    # Exceptions
    "AuthenticationException",
    "IdentityServiceException",
    "PhoneAlreadyBoundException",
    "PhoneNotVerifiedException",
    "ResourceNotFoundException",
    "SmsDeliveryFailedException",
    "SqlNotConfiguredException",
    "UpstreamServiceException",
    "ValidationException",
]
