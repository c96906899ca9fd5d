"""GOES imagery published on the NOAA STAR content delivery network.

Only the full disk GEOCOLOR composite is supported, for GOES-East (GOES16)
and GOES-West (GOES18). Use `create_imagery()` to build it from settings.
"""

from typing import Any

from goesctl.config import get_settings
from goesctl.sources.goes import DEFAULT_SIZE, IMAGE_SIZES, GOESImagery, Satellite


def create_imagery(satellite: str | None = None, size: str | None = None, **kwargs: Any) -> GOESImagery:
    """Create the imagery URL builder.
    When left empty, parameters are inferred from the `imagery` settings, if present.

    Args:
        satellite (str | None, optional): "east" or "west". Defaults to None (configured, else east).
        size (str | None, optional): image size, e.g. "1808x1808". Defaults to None (configured, else default).

    Returns:
        GOESImagery: configured URL builder.
    """
    params = get_settings().imagery.copy()
    params.update(kwargs)
    if satellite is not None:
        params["satellite"] = satellite
    if size is not None:
        params["size"] = size
    return GOESImagery(**params)


__all__ = ["GOESImagery", "Satellite", "IMAGE_SIZES", "DEFAULT_SIZE", "create_imagery"]
