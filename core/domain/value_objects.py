"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from enum import Enum


class LicenseLevel(Enum):
    """Authorization level granted by a license."""

    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"

    def __str__(self) -> str:
        """Return level as string."""
        return self.value

    @classmethod
    def parse(cls, value) -> "LicenseLevel":
        """
        Coerce a level name into a LicenseLevel.

        Args:
            value: LicenseLevel or its string value

        Returns:
            LicenseLevel member

        Raises:
            ValueError: If the value is not a known level
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = "/".join(level.value for level in cls)
            raise ValueError(f"Invalid license level: {value!r} (expected {allowed})") from None


class LicenseState(Enum):
    """Lifecycle state of a license instance."""

    UNSIGNED = "unsigned"
    SIGNED = "signed"
    VALID = "valid"
    EXPIRED = "expired"
    DEVICE_MISMATCH = "device-mismatch"
    SIGNATURE_INVALID = "signature-invalid"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


class InvalidReason(Enum):
    """Policy-level reason a license was rejected."""

    EXPIRED = "expired"
    DEVICE_MISMATCH = "device-mismatch"

    def __str__(self) -> str:
        """Return reason as string."""
        return self.value

    @property
    def state(self) -> LicenseState:
        """Lifecycle state that corresponds to this rejection."""
        return LicenseState(self.value)
