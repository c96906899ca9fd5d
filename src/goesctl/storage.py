import logging
from pathlib import Path

from goesctl.errors import DirectoryError
from goesctl.model import ResolvedWindow, compact_utc

log = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".part"


def output_dir_name(window: ResolvedWindow) -> str:
    return f"images_{compact_utc(window.start)}_to_{compact_utc(window.end)}_stride_{window.stride_minutes}m"


def allocate_output_dir(root: Path, window: ResolvedWindow) -> Path:
    """Create a fresh subdirectory of `root` dedicated to the given window.

    Args:
        root (Path): existing directory where the subdirectory is created.
        window (ResolvedWindow): window the subdirectory name is derived from.

    Raises:
        DirectoryError: when root is missing, the subdirectory already exists or cannot be created.

    Returns:
        Path: path to the newly created directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise DirectoryError("root missing", f"specified root directory '{root}' does not exist")

    target = root / output_dir_name(window)
    if target.exists():
        raise DirectoryError("already exists", f"subdirectory '{target}' already exists")
    try:
        target.mkdir()
    except FileExistsError as e:
        raise DirectoryError("already exists", f"subdirectory '{target}' already exists") from e
    except OSError as e:
        raise DirectoryError(f"create failed: {e}", f"could not create subdirectory '{target}'") from e

    log.info("Created subdirectory: %s", target)
    return target


def write_file(path: Path, data: bytes) -> None:
    """Write bytes to `path` through a temporary sibling, so readers never see partial files."""
    partial = path.with_name(path.name + PARTIAL_SUFFIX)
    try:
        with open(partial, "wb") as f:
            f.write(data)
        partial.replace(path)
    except OSError:
        partial.unlink(missing_ok=True)
        raise
    log.debug("Wrote %d bytes into %s", len(data), path)
