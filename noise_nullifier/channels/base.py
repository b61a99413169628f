"""Base class for silence channels."""

import logging
from abc import ABC, abstractmethod

from noise_nullifier.models.silence import Silence

logger = logging.getLogger(__name__)


class BaseChannel(ABC):
    """Abstract base class for backends that accept silences."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Channel name for logging."""
        ...

    @abstractmethod
    def target_url(self, client_url: str) -> str:
        """Derive the submission URL from an alert's client URL.

        Raises ValueError when ``client_url`` is unusable.
        """
        ...

    @abstractmethod
    async def send(self, silence: Silence, url: str) -> None:
        """Submit a silence, raising SilenceSubmitError on failure."""
        ...

    async def send_safe(self, silence: Silence, url: str) -> bool:
        """Send silence with error handling."""
        try:
            await self.send(silence, url)
            return True
        except Exception as e:
            logger.exception(f"Failed to send silence to {self.name}: {e}")
            return False
