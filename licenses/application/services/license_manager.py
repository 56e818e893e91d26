"""
LicenseManager application service.

Orchestrates the key store, the signature scheme and the license
repository into the license lifecycle:

    UNSIGNED -> SIGNED -> VALID | EXPIRED | DEVICE_MISMATCH | SIGNATURE_INVALID

and back to SIGNED after a renewal.
"""
import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Union

from core.domain.events import EventBus
from core.domain.exceptions import (
    KeyLoadError,
    LicenseInvalidError,
    SignatureInvalidError,
)
from core.domain.value_objects import LicenseLevel, LicenseState
from core.infrastructure.events import InMemoryEventBus
from LicenseTool.settings.base import LicenseSettings
from licenses.application.dto.license_dto import LicenseInfoDTO, VerificationResultDTO
from licenses.domain.events import (
    LicenseIssued,
    LicenseRejected,
    LicenseRenewed,
    LicenseVerified,
)
from licenses.domain.license import License, utc_now
from licenses.domain.services import LicenseSigner, LicenseValidator
from licenses.infrastructure.repositories.json_license_repository import (
    JsonLicenseRepository,
)
from licenses.ports.license_repository import LicenseRepository
from signing.domain.key_pair import KeyPair
from signing.infrastructure.file_key_store import FileKeyStore
from signing.infrastructure.schemes import get_signature_scheme
from signing.ports.key_store import KeyStore

logger = logging.getLogger(__name__)


class LicenseManager:
    """Issues, persists, verifies and renews licenses."""

    def __init__(
        self,
        settings: LicenseSettings,
        key_store: Optional[KeyStore] = None,
        repository: Optional[LicenseRepository] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize manager.

        Args:
            settings: Key locations and license metadata
            key_store: Key storage (PEM files for the configured scheme by default)
            repository: License storage (JSON files by default)
            event_bus: Bus receiving lifecycle events
            clock: Returns the current aware UTC time
        """
        self.settings = settings
        scheme = get_signature_scheme(settings.signature_scheme)
        self.key_store = key_store or FileKeyStore(scheme)
        self.repository = repository or JsonLicenseRepository()
        self.event_bus = event_bus or InMemoryEventBus()
        self.signer = LicenseSigner(scheme)
        self.clock = clock

    def generate_keys(self) -> KeyPair:
        """
        Generate a key pair and save it to the configured paths.

        Returns:
            The generated KeyPair

        Raises:
            KeyGenerationError: If generation fails
            StorageError: If a key file cannot be written
        """
        key_pair = self.key_store.generate_key_pair(self.settings.key_size)
        self.key_store.save_private_key(key_pair.private_key, self.settings.private_key_path)
        self.key_store.save_public_key(key_pair.public_key, self.settings.public_key_path)
        logger.info("Key pair written to %s", self.settings.config_dir)
        return key_pair

    def generate_license(
        self,
        user_name: str,
        device_id: str,
        level: Union[LicenseLevel, str],
        valid_days: int,
        features: Optional[Iterable[str]] = None,
    ) -> License:
        """
        Create and sign a new license.

        Args:
            user_name: Licensee
            device_id: Device the license is bound to
            level: LicenseLevel or its name
            valid_days: Days until expiry
            features: Optional feature names

        Returns:
            Signed License

        Raises:
            ValueError: If the arguments are invalid
            KeyLoadError: If the private key cannot be loaded
            SigningError: If signing fails
        """
        license = License.create(
            user_name=user_name,
            device_id=device_id,
            level=LicenseLevel.parse(level),
            valid_days=valid_days,
            features=features,
            issuer_id=self.settings.issuer_id,
            version=self.settings.license_version,
            now=self.clock(),
        )
        signed = self.signer.sign(license, self._load_private_key())

        logger.info(
            "Issued license %s (%s) valid until %s",
            signed.id,
            signed.level.value,
            signed.expires_at.isoformat(),
        )
        self.event_bus.publish(
            LicenseIssued(
                aggregate_id=signed.id,
                user_name=signed.user_name,
                device_id=signed.device_id,
                level=signed.level.value,
                expires_at=signed.expires_at,
            )
        )
        return signed

    def save_license(self, license: License, path) -> None:
        """
        Persist a license, signature included.

        Raises:
            StorageError: If the file cannot be written
        """
        self.repository.save(license, path)

    def load_license(self, path) -> License:
        """
        Load a license.

        Raises:
            StorageError: If the file is missing or unreadable
            DeserializationError: If the file is not a valid license
        """
        return self.repository.load(path)

    def verify_license(self, license: License, device_id: str) -> VerificationResultDTO:
        """
        Verify policy and signature of a license.

        The expiry and device checks run first and never touch key
        material. The license object is not modified.

        Args:
            license: License to verify
            device_id: Device presenting the license

        Returns:
            VerificationResultDTO for a valid license

        Raises:
            LicenseInvalidError: If expired or bound to another device
            KeyLoadError: If the public key cannot be loaded
            SignatureInvalidError: If the signature does not match
        """
        now = self.clock()
        try:
            LicenseValidator.ensure_valid(license, device_id, now)
        except LicenseInvalidError as e:
            self._reject(license, device_id, e.reason.state)
            raise

        public_key = self._load_public_key()
        try:
            self.signer.verify(license, public_key)
        except SignatureInvalidError:
            self._reject(license, device_id, LicenseState.SIGNATURE_INVALID)
            raise

        logger.info("License %s verified for device %s", license.id, device_id)
        self.event_bus.publish(LicenseVerified(aggregate_id=license.id, device_id=device_id))
        return VerificationResultDTO(
            license_id=license.id,
            device_id=device_id,
            state=LicenseState.VALID.value,
            level=license.level.value,
            expires_at=license.expires_at,
            days_remaining=license.days_until_expiration(now),
        )

    def renew_license(self, license: License, days: int) -> License:
        """
        Extend a license and sign it again.

        Only ``expires_at`` and ``signature`` change; identity, licensee,
        device, level and issue time are kept.

        Args:
            license: License to renew
            days: Days to add

        Returns:
            Re-signed License

        Raises:
            ValueError: If ``days`` is not positive
            KeyLoadError: If the private key cannot be loaded
            SigningError: If signing fails
        """
        renewed = license.renew(days, now=self.clock())
        signed = self.signer.sign(renewed, self._load_private_key())

        logger.info(
            "Renewed license %s by %d day(s), now valid until %s",
            signed.id,
            days,
            signed.expires_at.isoformat(),
        )
        self.event_bus.publish(
            LicenseRenewed(
                aggregate_id=signed.id,
                previous_expiration=license.expires_at,
                new_expiration=signed.expires_at,
            )
        )
        return signed

    def get_license_info(self, license: License) -> LicenseInfoDTO:
        """
        Describe a license without checking its signature.

        Args:
            license: License to describe

        Returns:
            LicenseInfoDTO
        """
        now = self.clock()
        expired = license.is_expired(now)
        return LicenseInfoDTO(
            id=license.id,
            user_name=license.user_name,
            device_id=license.device_id,
            level=license.level.value,
            issued_at=license.issued_at,
            expires_at=license.expires_at,
            features=list(license.features or ()),
            issuer_id=license.issuer_id,
            version=license.version,
            state=(LicenseState.EXPIRED if expired else license.state).value,
            is_expired=expired,
            days_remaining=license.days_until_expiration(now),
        )

    def _reject(self, license: License, device_id: str, state: LicenseState) -> None:
        logger.warning("License %s rejected for device %s: %s", license.id, device_id, state.value)
        self.event_bus.publish(
            LicenseRejected(aggregate_id=license.id, device_id=device_id, reason=state.value)
        )

    def _load_private_key(self):
        try:
            return self.key_store.load_private_key(self.settings.private_key_path)
        except KeyLoadError:
            logger.error("Cannot load private key from %s", self.settings.private_key_path)
            raise

    def _load_public_key(self):
        try:
            return self.key_store.load_public_key(self.settings.public_key_path)
        except KeyLoadError:
            logger.error("Cannot load public key from %s", self.settings.public_key_path)
            raise
