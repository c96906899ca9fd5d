"""Downloader implementations used to retrieve images.

- HTTPDownloader: HTTP/HTTPS downloads with progress tracking, one attempt per image

Downloaders implement the Downloader interface: `init()`, `fetch()` and `close()`.
"""

from typing import Any

from goesctl.config import get_settings
from goesctl.downloaders.base import Downloader
from goesctl.downloaders.http import HTTPDownloader


def create_downloader(max_concurrency: int | None = None, **kwargs: Any) -> HTTPDownloader:
    """Create the HTTP downloader from the `download` settings section.

    Args:
        max_concurrency (int | None, optional): concurrent fetches to size the connection pool for.
            Defaults to None (configured or default pool size).
        kwargs (Any): overrides for the configured downloader arguments.

    Returns:
        HTTPDownloader: downloader, still to be initialized.
    """
    config = dict(get_settings().download)
    config.update(kwargs)
    if max_concurrency is not None:
        config["pool_maxsize"] = max(max_concurrency, config.get("pool_maxsize", 0))
    return HTTPDownloader(**config)


__all__ = ["Downloader", "HTTPDownloader", "create_downloader"]
