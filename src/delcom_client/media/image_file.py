"""Turn a picked image into a small upload-ready file."""

import logging
import mimetypes
import tempfile
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from ..core.client.errors import InvalidFileError

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_SIZE = 140
JPEG_QUALITY = 90

_PIL_FORMAT_MIME = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
}


def detect_mime_type(source: Path, image_format: Optional[str] = None) -> str:
    """MIME type of an image, from its decoded format or else its name."""
    if image_format and image_format in _PIL_FORMAT_MIME:
        return _PIL_FORMAT_MIME[image_format]
    guessed, _ = mimetypes.guess_type(source.name)
    return guessed or "image/jpeg"


def extension_for(mime_type: str) -> str:
    if mime_type == "image/png":
        return "png"
    if mime_type in ("image/jpeg", "image/jpg"):
        return "jpg"
    logger.warning(f"Unsupported MIME type: {mime_type}, defaulting to jpg")
    return "jpg"


def is_valid_upload(path: Union[str, Path]) -> bool:
    """True when the file exists and is not empty."""
    path = Path(path)
    return path.is_file() and path.stat().st_size > 0


def _discard(path: Optional[Path]) -> None:
    if path is not None and path.exists():
        path.unlink()


def materialize_image(
    source: Union[str, Path],
    size_px: int = DEFAULT_IMAGE_SIZE,
    cache_dir: Optional[Path] = None,
) -> Path:
    """
    Decode `source`, resize it to a `size_px` square and write it to a
    temporary file in `cache_dir`.

    Raises:
        InvalidFileError: if the source cannot be read or decoded, the
            result cannot be written, or the written file ends up empty.
    """
    source = Path(source)
    if not source.is_file():
        raise InvalidFileError(f"Failed to convert file: {source} does not exist", path=str(source))

    try:
        with Image.open(source) as original:
            mime_type = detect_mime_type(source, original.format)
            extension = extension_for(mime_type)
            resized = original.resize((size_px, size_px), Image.LANCZOS)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise InvalidFileError(f"Failed to decode image {source}: {e}", path=str(source), original_error=e)

    target: Optional[Path] = None
    try:
        if cache_dir is not None:
            Path(cache_dir).mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            prefix="profile_",
            suffix=f".{extension}",
            dir=cache_dir,
            delete=False,
        ) as output:
            target = Path(output.name)
            if extension == "png":
                resized.save(output, format="PNG")
            else:
                if resized.mode not in ("RGB", "L"):
                    resized = resized.convert("RGB")
                resized.save(output, format="JPEG", quality=JPEG_QUALITY)
    except (OSError, ValueError) as e:
        _discard(target)
        raise InvalidFileError(f"Failed to write image for {source}: {e}", path=str(source), original_error=e)

    if not is_valid_upload(target):
        _discard(target)
        raise InvalidFileError(f"Created file is empty: {target}", path=str(target))

    logger.debug(f"Created file: {target}, size: {target.stat().st_size} bytes, format: {extension}")
    return target
