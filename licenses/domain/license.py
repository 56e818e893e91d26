"""
License domain entity.

This is the core domain entity representing a signed license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Tuple

from core.domain.value_objects import LicenseLevel, LicenseState

DEFAULT_VERSION = "1.0"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime, name: str) -> datetime:
    if not isinstance(value, datetime):
        raise ValueError(f"{name} must be a datetime")
    if value.tzinfo is None:
        raise ValueError(f"{name} must be timezone-aware")
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Asserts that ``user_name`` may use the product at ``level`` on
    ``device_id`` until ``expires_at``. ``signature`` commits to every
    other field; any change to them invalidates it.

    Instances are immutable: ``renew`` and ``with_signature`` return a
    new instance with the same identity.
    """

    id: str
    user_name: str
    device_id: str
    level: LicenseLevel
    issued_at: datetime
    expires_at: datetime
    features: Optional[Tuple[str, ...]] = field(default_factory=tuple)
    signature: str = ""
    issuer_id: str = ""
    version: str = DEFAULT_VERSION
    # Timestamp text as read from a license file. The signature covers this
    # text, which may carry a local offset and nanoseconds.
    issued_at_text: Optional[str] = field(default=None, compare=False, repr=False)
    expires_at_text: Optional[str] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        """Validate and normalize license entity."""
        if not self.id:
            raise ValueError("License ID is required")
        if not self.user_name:
            raise ValueError("User name is required")
        if not self.device_id:
            raise ValueError("Device ID is required")
        object.__setattr__(self, "level", LicenseLevel.parse(self.level))
        object.__setattr__(self, "issued_at", _as_utc(self.issued_at, "issued_at"))
        object.__setattr__(self, "expires_at", _as_utc(self.expires_at, "expires_at"))
        if self.features is not None:
            object.__setattr__(self, "features", tuple(self.features))

    @classmethod
    def create(
        cls,
        user_name: str,
        device_id: str,
        level: LicenseLevel,
        valid_days: int,
        features: Optional[Iterable[str]] = None,
        issuer_id: str = "",
        version: str = DEFAULT_VERSION,
        now: Optional[datetime] = None,
        license_id: Optional[str] = None,
    ) -> "License":
        """
        Create a new, unsigned License entity.

        Args:
            user_name: Licensee
            device_id: Device the license is bound to
            level: Authorization level
            valid_days: Days from now until expiry
            features: Optional feature names
            issuer_id: Issuer identifier
            version: License format version
            now: Issue time (defaults to current UTC time)
            license_id: Optional ID (generated if not provided)

        Returns:
            License entity instance
        """
        if valid_days < 1:
            raise ValueError("Validity must be at least 1 day")
        issued_at = now or utc_now()
        return cls(
            id=license_id or str(uuid.uuid4()),
            user_name=user_name,
            device_id=device_id,
            level=level,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(days=valid_days),
            features=tuple(features or ()),
            issuer_id=issuer_id,
            version=version,
        )

    @property
    def state(self) -> LicenseState:
        """SIGNED once a signature is attached, UNSIGNED before."""
        return LicenseState.SIGNED if self.signature else LicenseState.UNSIGNED

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """
        Check if the license has expired.

        The expiry instant itself still counts as valid.

        Args:
            now: Current time (defaults to current UTC time)
        """
        return (now or utc_now()) > self.expires_at

    def is_valid(self, device_id: str, now: Optional[datetime] = None) -> bool:
        """
        Check expiry and device binding.

        Args:
            device_id: Device presenting the license
            now: Current time (defaults to current UTC time)

        Returns:
            True if not expired and bound to ``device_id``
        """
        if self.is_expired(now):
            return False
        return self.device_id == device_id

    def days_until_expiration(self, now: Optional[datetime] = None) -> int:
        """Whole days left, rounded down; 0 once expired."""
        check_time = now or utc_now()
        if self.is_expired(check_time):
            return 0
        return (self.expires_at - check_time).days

    def renew(self, days: int, now: Optional[datetime] = None) -> "License":
        """
        Create a new License instance with extended expiry.

        A live license is extended from its current expiry; an expired
        one restarts from ``now``. The result carries no signature.

        Args:
            days: Days to add
            now: Current time (defaults to current UTC time)

        Returns:
            New unsigned License instance
        """
        if days < 1:
            raise ValueError("Renewal must be at least 1 day")
        check_time = now or utc_now()
        base = check_time if self.is_expired(check_time) else self.expires_at
        return replace(
            self, expires_at=base + timedelta(days=days), expires_at_text=None
        ).unsigned()

    def with_signature(self, signature: str) -> "License":
        """Return a copy carrying ``signature``."""
        return replace(self, signature=signature)

    def unsigned(self) -> "License":
        """Return a copy with the signature cleared."""
        return replace(self, signature="")
