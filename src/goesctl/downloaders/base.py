from abc import ABC, abstractmethod
from typing import Any


class Downloader(ABC):
    """Abstract base class for downloaders."""

    @abstractmethod
    def init(self, **kwargs: Any) -> None:
        """Initialize downloader with optional configuration.

        Args:
            **kwargs (Any): Additional keyword arguments for initialization
        """
        ...

    @abstractmethod
    def fetch(self, uri: str, item_id: str) -> bytes:
        """Retrieve the resource at `uri`, in a single attempt.

        Args:
            uri (str): URI to download from
            item_id (str): Item identifier for progress tracking

        Raises:
            TransportError: if the resource could not be retrieved

        Returns:
            bytes: content of the resource
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close downloader and release resources."""
        ...

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
