"""
Device Identity Module

The feed has no accounts. Each client generates a pseudo-anonymous device
identifier once, stores it locally, and sends it as ``userId`` on every call
that needs an identity.
"""

import os
import random
import string
import time
from typing import Optional

from config import settings
from data.protocols import DeviceIdStorage
from utils.exceptions import DeviceIdError
from utils.helpers import ensure_dir_exists
from utils.logger import get_logger

logger = get_logger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_device_id(now_ms: Optional[int] = None, rng: Optional[random.Random] = None) -> str:
    """
    Generate a new device identifier: ``device_<epoch ms>_<9 base-36 chars>``.

    Args:
        now_ms: Timestamp in milliseconds (defaults to the current time).
        rng: Random source (defaults to the module's global generator).

    Returns:
        str: The new identifier.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    rng = rng or random
    suffix = "".join(rng.choice(_ID_ALPHABET) for _ in range(9))
    return f"{settings.DEVICE_ID_PREFIX}{now_ms}_{suffix}"


class FileDeviceIdStorage:
    """Stores the device identifier in a one-line text file."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                value = f.read().strip()
        except OSError as e:
            raise DeviceIdError(f"Could not read device id from {self.path}: {e}") from e
        return value or None

    def save(self, device_id: str) -> None:
        try:
            ensure_dir_exists(os.path.dirname(self.path))
            with open(self.path, 'w', encoding='utf-8') as f:
                f.write(device_id + "\n")
        except OSError as e:
            raise DeviceIdError(f"Could not write device id to {self.path}: {e}") from e


class DeviceIdStore:
    """Hands out the device identifier, creating and persisting it on first use."""

    def __init__(self, storage: Optional[DeviceIdStorage] = None):
        """
        Initialize the store.

        Args:
            storage: Where the identifier lives. None means no persistent storage
                is available, in which case the fixed default identifier is used.
        """
        self.storage = storage
        self._device_id: Optional[str] = None

    @classmethod
    def from_settings(cls) -> "DeviceIdStore":
        path = settings.DEVICE_ID_FILE
        return cls(FileDeviceIdStorage(path) if path else None)

    def get_device_id(self) -> str:
        """
        Return the device identifier, generating and saving one if needed.

        Returns:
            str: The identifier; the same value on every call.
        """
        if self._device_id:
            return self._device_id

        if self.storage is None:
            self._device_id = settings.DEFAULT_DEVICE_ID
            return self._device_id

        try:
            stored = self.storage.load()
        except DeviceIdError as e:
            logger.warning(f"{e}; generating a new device id")
            stored = None

        if stored:
            self._device_id = stored
            return self._device_id

        device_id = generate_device_id()
        try:
            self.storage.save(device_id)
            logger.info(f"Created new device id {device_id}")
        except DeviceIdError as e:
            # Keep the id for this process so every call in the run agrees
            logger.warning(f"{e}; device id will not survive this run")

        self._device_id = device_id
        return self._device_id
