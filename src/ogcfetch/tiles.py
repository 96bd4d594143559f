"""
Persistence of fetched map tiles.
"""

import logging
from pathlib import Path
from typing import Union

from .errors import IoError

logger = logging.getLogger(__name__)


def save_tile_to_file(data: Union[bytes, bytearray, memoryview], path: Union[str, Path]) -> Path:
    """
    Write tile bytes to ``path`` verbatim.

    The parent directory must already exist. If the write fails part way,
    the partially written file is removed before the error is raised.

    Args:
        data: Encoded image returned by ``WMSService.fetch_map_tile``
        path: Destination file path

    Returns:
        The path written to

    Raises:
        IoError: If the file cannot be created or fully written
    """
    output_path = Path(path)
    expected = memoryview(data).nbytes

    try:
        handle = open(output_path, "wb")
    except OSError as exc:
        raise IoError(f"Cannot create tile file {output_path}: {exc}", path=output_path, cause=exc) from exc

    try:
        with handle:
            written = handle.write(data)
    except OSError as exc:
        _discard(output_path)
        raise IoError(f"Failed to write tile file {output_path}: {exc}", path=output_path, cause=exc) from exc

    if written != expected:
        _discard(output_path)
        raise IoError(
            f"Incomplete write to {output_path}: {written} of {expected} bytes",
            path=output_path,
        )

    logger.debug("Saved %d byte tile to %s", written, output_path)
    return output_path


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove partial tile file %s: %s", path, exc)
