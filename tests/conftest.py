"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.domain.events import EventHandler
from core.domain.value_objects import LicenseLevel
from core.infrastructure.events import InMemoryEventBus
from LicenseTool.settings.base import LicenseSettings
from licenses.application.services.license_manager import LicenseManager
from licenses.domain.license import License
from signing.infrastructure.ecdsa_scheme import ECDSASignatureScheme
from signing.infrastructure.file_key_store import FileKeyStore
from signing.infrastructure.rsa_scheme import RSASignatureScheme

FIXED_NOW = datetime(2026, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingHandler(EventHandler):
    """Event handler that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def handle(self, event) -> None:
        self.events.append(event)


@pytest.fixture(scope="session")
def rsa_key_pair():
    """Fixture for a 2048-bit RSA key pair, shared across the session."""
    return RSASignatureScheme().generate_key_pair(2048)


@pytest.fixture(scope="session")
def other_rsa_key_pair():
    """Fixture for an unrelated RSA key pair."""
    return RSASignatureScheme().generate_key_pair(2048)


@pytest.fixture(scope="session")
def ec_key_pair():
    """Fixture for a P-256 key pair."""
    return ECDSASignatureScheme().generate_key_pair(256)


@pytest.fixture
def now():
    """Fixture for the fixed current time."""
    return FIXED_NOW


@pytest.fixture
def clock():
    """Fixture for a frozen clock starting at FIXED_NOW."""
    return FrozenClock()


@pytest.fixture
def settings(tmp_path):
    """Fixture for settings pointing at an empty key directory."""
    return LicenseSettings(config_dir=tmp_path / "keys", environment="test")


@pytest.fixture
def keyed_settings(settings, rsa_key_pair):
    """Fixture for settings whose key directory holds the session key pair."""
    key_store = FileKeyStore()
    key_store.save_private_key(rsa_key_pair.private_key, settings.private_key_path)
    key_store.save_public_key(rsa_key_pair.public_key, settings.public_key_path)
    return settings


@pytest.fixture
def event_recorder():
    """Fixture for a handler recording published events."""
    return RecordingHandler()


@pytest.fixture
def manager(keyed_settings, clock, event_recorder):
    """Fixture for a LicenseManager with keys on disk and a frozen clock."""
    from licenses.domain.events import (
        LicenseIssued,
        LicenseRejected,
        LicenseRenewed,
        LicenseVerified,
    )

    event_bus = InMemoryEventBus()
    for event_type in (LicenseIssued, LicenseRenewed, LicenseVerified, LicenseRejected):
        event_bus.subscribe(event_type, event_recorder)
    return LicenseManager(keyed_settings, event_bus=event_bus, clock=clock)


@pytest.fixture
def sample_license(now):
    """Fixture for an unsigned 30-day professional license."""
    return License.create(
        user_name="alice",
        device_id="dev-1",
        level=LicenseLevel.PROFESSIONAL,
        valid_days=30,
        features=["export", "reports"],
        issuer_id="issuer-01",
        now=now,
    )


@pytest.fixture
def local_time_payload():
    """
    Fixture for the compact payload of a license issued in UTC+8.

    Timestamps carry a local offset and nanoseconds and features are null,
    as written by issuers that keep the machine's local time.
    """
    return (
        b'{"id":"7d0f6a8e-0c5b-4f4e-9a57-2b1f3c9d8e11","userName":"alice",'
        b'"deviceId":"dev-1","level":"professional",'
        b'"issuedAt":"2026-03-01T17:30:00.123456789+08:00",'
        b'"expiresAt":"2026-03-31T17:30:00.123456789+08:00",'
        b'"features":null,"signature":"","issuerId":"","version":"1.0"}'
    )
