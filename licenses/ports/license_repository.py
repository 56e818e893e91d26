"""
License storage port.

The manager only needs to put a license somewhere and get it back;
how and where is up to the adapter.
"""
from abc import ABC, abstractmethod

from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Stores signed licenses by location.

    A location is whatever the adapter addresses licenses by, a file
    path for the JSON adapter.
    """

    @abstractmethod
    def save(self, license: License, location) -> None:
        """
        Store ``license`` at ``location``, replacing any previous content.

        Raises:
            StorageError: If the license cannot be stored
        """
        pass

    @abstractmethod
    def load(self, location) -> License:
        """
        Read the license stored at ``location``.

        Raises:
            StorageError: If nothing readable is stored there
            DeserializationError: If the stored content is not a license
        """
        pass
