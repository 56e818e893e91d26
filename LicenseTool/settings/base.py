"""
Base settings for the license tool.

Settings are an explicit, immutable object handed to the license
manager. ``from_env`` reads overrides from the environment; the CLI
applies its flags on top with ``dataclasses.replace``.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from signing.infrastructure.rsa_scheme import DEFAULT_KEY_SIZE

ENV_PREFIX = "LICENSE_TOOL_"
ENVIRONMENTS = ("development", "production", "test")


def default_config_dir() -> Path:
    """Directory holding the key pair, ``~/.license-demo`` by default."""
    try:
        return Path.home() / ".license-demo"
    except RuntimeError:
        return Path(".license-demo")


@dataclass(frozen=True)
class LicenseSettings:
    """Configuration for key locations, signing and license metadata."""

    config_dir: Path = field(default_factory=default_config_dir)
    private_key_name: str = "private.pem"
    public_key_name: str = "public.pem"
    key_size: int = DEFAULT_KEY_SIZE
    signature_scheme: str = "rsa"
    issuer_id: str = ""
    license_version: str = "1.0"
    environment: str = "production"
    log_level: Optional[str] = None

    def __post_init__(self):
        """Validate settings."""
        object.__setattr__(self, "config_dir", Path(self.config_dir).expanduser())
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"Invalid environment {self.environment!r} (expected {', '.join(ENVIRONMENTS)})"
            )
        if self.key_size < 1:
            raise ValueError("Key size must be positive")

    @property
    def private_key_path(self) -> Path:
        """Path of the issuer private key."""
        return self.config_dir / self.private_key_name

    @property
    def public_key_path(self) -> Path:
        """Path of the issuer public key."""
        return self.config_dir / self.public_key_name

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LicenseSettings":
        """
        Build settings from ``LICENSE_TOOL_*`` environment variables.

        Args:
            environ: Mapping to read (defaults to ``os.environ``)

        Returns:
            LicenseSettings with unset variables left at their defaults
        """
        environ = os.environ if environ is None else environ
        overrides = {}

        def get(name: str) -> Optional[str]:
            value = environ.get(ENV_PREFIX + name)
            return value if value else None

        if get("CONFIG_DIR"):
            overrides["config_dir"] = Path(get("CONFIG_DIR"))
        if get("KEY_SIZE"):
            try:
                overrides["key_size"] = int(get("KEY_SIZE"))
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}KEY_SIZE must be an integer") from None
        if get("SCHEME"):
            overrides["signature_scheme"] = get("SCHEME").lower()
        if get("ISSUER_ID"):
            overrides["issuer_id"] = get("ISSUER_ID")
        if get("ENV"):
            overrides["environment"] = get("ENV").lower()
        if get("LOG_LEVEL"):
            overrides["log_level"] = get("LOG_LEVEL").upper()

        return cls(**overrides)
