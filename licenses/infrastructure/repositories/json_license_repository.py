"""
JSON file implementation of LicenseRepository port.

This adapter converts between domain entities and license files.
"""
import logging

from core.infrastructure.files import atomic_write, read_bytes
from licenses.domain import serialization
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class JsonLicenseRepository(LicenseRepository):
    """
    Stores each license as an indented JSON document.

    Concurrent writers to the same file are last-writer-wins;
    replacement is atomic, so a reader sees either version whole.
    """

    def save(self, license: License, location) -> None:
        """
        Write a license file.

        Raises:
            StorageError: If the file cannot be written
        """
        target = atomic_write(location, serialization.dumps(license))
        logger.info("Saved license %s to %s", license.id, target)

    def load(self, location) -> License:
        """
        Read a license file.

        Raises:
            StorageError: If the file is missing or unreadable
            DeserializationError: If the content is not a valid license
        """
        license = serialization.loads(read_bytes(location))
        logger.debug("Loaded license %s from %s", license.id, location)
        return license
