import logging
from datetime import datetime
from enum import Enum

import requests

from goesctl.errors import InvalidURLError
from goesctl.model import as_utc

log = logging.getLogger(__name__)

# e.g. https://cdn.star.nesdis.noaa.gov/GOES16/ABI/FD/GEOCOLOR/20243350830_GOES16-ABI-FD-GEOCOLOR-1808x1808.jpg
CDN_HOST = "cdn.star.nesdis.noaa.gov"
URL_TEMPLATE = "https://{host}/{sat}/ABI/FD/GEOCOLOR/{timestamp}_{sat}-ABI-FD-GEOCOLOR-{size}.jpg"
URL_TIME_FORMAT = "%Y%j%H%M"

DEFAULT_SIZE = "1808x1808"
# full disk renditions published by the CDN
IMAGE_SIZES = ("339x339", "678x678", "1808x1808", "5424x5424", "10848x10848")


class Satellite(str, Enum):
    EAST = "east"
    WEST = "west"

    @property
    def url_fragment(self) -> str:
        return {Satellite.EAST: "GOES16", Satellite.WEST: "GOES18"}[self]


class GOESImagery:
    """Builds CDN URLs of the full disk GEOCOLOR composite of a GOES satellite."""

    def __init__(self, satellite: Satellite | str = Satellite.EAST, size: str = DEFAULT_SIZE):
        self.satellite = Satellite(satellite)
        if size not in IMAGE_SIZES:
            raise ValueError(f"Unsupported image size '{size}', expected one of {list(IMAGE_SIZES)}")
        self.size = size

    def build_url(self, timestamp: datetime) -> str:
        """Build the URL of the image acquired at `timestamp`.

        Args:
            timestamp (datetime): acquisition time, naive values are treated as UTC.

        Raises:
            InvalidURLError: if the resulting URL is not valid.

        Returns:
            str: URL of the image.
        """
        fragment = self.satellite.url_fragment
        url = URL_TEMPLATE.format(
            host=CDN_HOST,
            sat=fragment,
            timestamp=as_utc(timestamp).strftime(URL_TIME_FORMAT),
            size=self.size,
        )
        try:
            request = requests.PreparedRequest()
            request.prepare_url(url, params=None)
        except requests.exceptions.RequestException as e:
            raise InvalidURLError("invalid url", f"{url} for time {timestamp.isoformat()}: {e}") from e
        return request.url or url

    def __str__(self) -> str:
        return f"GOESImagery({self.satellite.url_fragment}, {self.size})"
