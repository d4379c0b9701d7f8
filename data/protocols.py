"""
Data Layer Protocol Definitions

This module defines typing.Protocol interfaces for local persistence.
The only thing the client persists is the device identifier, so the
protocol is small; it lets services and tests swap the file-backed store
for an in-memory one.

Protocols defined:
- DeviceIdStorage: Interface for reading and writing the device identifier
"""

from typing import Protocol, Optional


class DeviceIdStorage(Protocol):
    """Protocol defining the interface for device identifier storage.

    Implementations should provide methods for:
    - Loading a previously stored identifier
    - Saving a newly generated identifier
    """

    def load(self) -> Optional[str]:
        """Load the stored device identifier.

        Returns:
            The identifier, or None if nothing has been stored yet.
        """
        ...

    def save(self, device_id: str) -> None:
        """Persist the device identifier.

        Args:
            device_id: The identifier to store.

        Raises:
            DeviceIdError: If the identifier cannot be written.
        """
        ...
