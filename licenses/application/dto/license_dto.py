"""
License DTOs handed to the presentation layer.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List


@dataclass
class VerificationResultDTO:
    """DTO for a successful license verification."""

    license_id: str
    device_id: str
    state: str
    level: str
    expires_at: datetime
    days_remaining: int


@dataclass
class LicenseInfoDTO:
    """DTO for license information."""

    id: str
    user_name: str
    device_id: str
    level: str
    issued_at: datetime
    expires_at: datetime
    features: List[str]
    issuer_id: str
    version: str
    state: str
    is_expired: bool
    days_remaining: int
