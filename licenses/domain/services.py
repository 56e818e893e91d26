"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import base64
import binascii
from datetime import datetime
from typing import Optional, Tuple

from core.domain.exceptions import (
    DeviceMismatchError,
    LicenseExpiredError,
    SignatureInvalidError,
)
from core.domain.value_objects import InvalidReason
from licenses.domain.license import License
from licenses.domain.serialization import canonical_payload
from signing.ports.signature_scheme import SignatureScheme


class LicenseValidator:
    """Domain service for the non-cryptographic license policy."""

    @staticmethod
    def validate_license(
        license: License, device_id: str, now: Optional[datetime] = None
    ) -> Tuple[bool, Optional[InvalidReason]]:
        """
        Validate expiry and device binding.

        Expiry is checked first, so an expired license on the wrong
        device reports EXPIRED.

        Args:
            license: License entity to validate
            device_id: Device presenting the license
            now: Current time

        Returns:
            Tuple of (is_valid, reason)
        """
        if license.is_expired(now):
            return False, InvalidReason.EXPIRED
        if not license.is_valid(device_id, now):
            return False, InvalidReason.DEVICE_MISMATCH
        return True, None

    @staticmethod
    def ensure_valid(license: License, device_id: str, now: Optional[datetime] = None) -> None:
        """
        Raise if the license fails the policy check.

        Raises:
            LicenseExpiredError: If the license has expired
            DeviceMismatchError: If the license is bound to another device
        """
        is_valid, reason = LicenseValidator.validate_license(license, device_id, now)
        if is_valid:
            return
        if reason is InvalidReason.EXPIRED:
            raise LicenseExpiredError(
                f"License {license.id} expired at {license.expires_at.isoformat()}"
            )
        raise DeviceMismatchError(f"License {license.id} is not issued for this device")


class LicenseSigner:
    """Domain service binding a license to a signature."""

    def __init__(self, scheme: SignatureScheme):
        """
        Initialize signer.

        Args:
            scheme: Signature scheme used to sign and verify
        """
        self.scheme = scheme

    def sign(self, license: License, private_key) -> License:
        """
        Sign a license.

        Args:
            license: License to sign (any existing signature is ignored)
            private_key: Issuer private key

        Returns:
            Copy of ``license`` carrying the base64 signature

        Raises:
            SigningError: If the key cannot sign
        """
        signature = self.scheme.sign(private_key, canonical_payload(license))
        return license.with_signature(base64.b64encode(signature).decode("ascii"))

    def verify(self, license: License, public_key) -> None:
        """
        Verify a license signature.

        Args:
            license: Signed license
            public_key: Issuer public key

        Raises:
            SignatureInvalidError: If the signature is missing, not base64,
                or does not match the license contents
        """
        try:
            signature = base64.b64decode(license.signature, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SignatureInvalidError() from e
        self.scheme.verify(public_key, canonical_payload(license), signature)
