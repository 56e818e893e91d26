"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""

from core.domain.value_objects import InvalidReason


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class StorageError(DomainException):
    """Raised when a license or key file cannot be read or written."""

    def __init__(self, message: str = "File access failed"):
        super().__init__(message, code="IO_ERROR")


class KeyException(DomainException):
    """Base exception for key material errors."""

    pass


class KeyGenerationError(KeyException):
    """Raised when a key pair cannot be generated."""

    def __init__(self, message: str = "Key generation failed"):
        super().__init__(message, code="KEY_GENERATION_FAILED")


class KeyLoadError(KeyException):
    """Raised when a key cannot be loaded from storage."""

    def __init__(self, message: str = "Key could not be loaded", code: str = "KEY_LOAD_FAILED"):
        super().__init__(message, code=code)


class KeyFormatError(KeyLoadError):
    """Raised when key armor or encoding is malformed."""

    def __init__(self, message: str = "Malformed key material"):
        super().__init__(message, code="KEY_FORMAT_INVALID")


class KeyTypeError(KeyLoadError):
    """Raised when decoded key material is not the expected key type."""

    def __init__(self, message: str = "Unexpected key type"):
        super().__init__(message, code="KEY_TYPE_INVALID")


class SignatureException(DomainException):
    """Base exception for signature errors."""

    pass


class SigningError(SignatureException):
    """Raised when a payload cannot be signed."""

    def __init__(self, message: str = "Signing failed"):
        super().__init__(message, code="SIGNING_FAILED")


class SignatureInvalidError(SignatureException):
    """Raised when a signature does not match its payload and key."""

    def __init__(self, message: str = "Signature verification failed"):
        super().__init__(message, code="SIGNATURE_INVALID")


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class DeserializationError(LicenseException):
    """Raised when a license document is malformed or incomplete."""

    def __init__(self, message: str = "Malformed license data"):
        super().__init__(message, code="LICENSE_MALFORMED")


class LicenseInvalidError(LicenseException):
    """
    Raised when a license fails the policy check.

    This is a non-cryptographic rejection; ``reason`` tells the
    caller whether the license expired or belongs to another device.
    """

    def __init__(self, reason: InvalidReason, message: str = None, code: str = None):
        super().__init__(
            message or f"License is not valid: {reason.value}",
            code=code or reason.name,
        )
        self.reason = reason


class LicenseExpiredError(LicenseInvalidError):
    """Raised when a license has expired."""

    def __init__(self, message: str = "License has expired"):
        super().__init__(InvalidReason.EXPIRED, message, code="LICENSE_EXPIRED")


class DeviceMismatchError(LicenseInvalidError):
    """Raised when a license is presented on a device it was not issued for."""

    def __init__(self, message: str = "License is bound to a different device"):
        super().__init__(InvalidReason.DEVICE_MISMATCH, message, code="DEVICE_MISMATCH")
