import logging

import requests
from requests.adapters import HTTPAdapter

from goesctl.downloaders.base import Downloader
from goesctl.errors import TransportError
from goesctl.model import ProgressEventType
from goesctl.progress.events import emit_event

log = logging.getLogger(__name__)

# HTTP downloader configuration defaults
DEFAULT_CHUNK_SIZE = 8192  # 8KB
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_POOL_CONNECTIONS = 10
DEFAULT_POOL_MAX_SIZE = 8


class HTTPDownloader(Downloader):
    """HTTP downloader with progress reporting, one attempt per resource."""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        pool_connections: int = DEFAULT_POOL_CONNECTIONS,
        pool_maxsize: int = DEFAULT_POOL_MAX_SIZE,
    ):
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.pool_conns = pool_connections
        self.pool_size = pool_maxsize
        self.session: requests.Session | None = None

    def init(self, session: requests.Session | None = None, **kwargs) -> None:
        if not session:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=self.pool_conns, pool_maxsize=self.pool_size)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self.session = session

    def fetch(self, uri: str, item_id: str) -> bytes:
        """
        Download the resource at `uri` into memory, reporting progress per chunk.
        """
        if self.session is None:
            raise RuntimeError("Downloader not initialized, call init() first")

        log.debug("Downloading resource %s", uri)
        try:
            response = self.session.get(uri, stream=True, timeout=self.timeout)
            try:
                # anything but 2xx is a failure, redirects included
                if not 200 <= response.status_code < 300:
                    raise TransportError(f"HTTP {response.status_code}", f"{uri} answered {response.reason}")

                if "Content-Length" in response.headers:
                    total_size = int(response.headers["Content-Length"])
                    emit_event(ProgressEventType.TASK_DURATION, task_id=item_id, duration=total_size)

                buffer = bytearray()
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    if chunk:
                        buffer.extend(chunk)
                        emit_event(ProgressEventType.TASK_PROGRESS, task_id=item_id, advance=len(chunk))
            finally:
                response.close()
        except requests.exceptions.Timeout as e:
            log.debug("Timeout downloading %s: %s", uri, e)
            raise TransportError("timed out", f"{uri} did not answer within {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            log.debug("Request error downloading %s: %s", uri, e)
            raise TransportError("request error", f"{uri}: {e}") from e

        log.debug("Successfully downloaded %s (%s bytes)", uri, len(buffer))
        return bytes(buffer)

    def close(self) -> None:
        if self.session:
            self.session.close()
            self.session = None
