"""File I/O for strokes files, configs and rendered signatures.

Every write goes to a uniquely named temp file in the target directory, is
fsynced, then renamed over the target. A viewer polling an export directory
never sees a half-written PNG, SVG or strokes file, and two exports racing
on the same path leave one complete file.

Usage:
    from inkpad.utils import fs

    fs.atomic_save_image(surface.to_rgba8(), out_dir / "signature.png")
    fs.atomic_write_text(out_dir / "signature.svg", pad.to_svg())
    fs.atomic_yaml_dump({"schema": "strokes.v1", "groups": records}, out_dir / "sig.yaml")
"""

import io
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml
from PIL import Image

PathLike = Union[str, Path]

# Raster formats a signature can be exported to, by file extension
IMAGE_FORMATS = {
    '.png': 'PNG',
    '.jpg': 'JPEG',
    '.jpeg': 'JPEG',
    '.webp': 'WEBP',
}


def ensure_dir(p: PathLike) -> Path:
    """Create ``p`` (and parents) if missing; return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(path: PathLike, data: bytes) -> None:
    """Replace ``path`` with ``data`` in one rename.

    Raises
    ------
    RuntimeError
        If writing or renaming fails; the temp file is removed and an existing
        target is left untouched.
    """
    path = Path(path)
    directory = ensure_dir(path.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".part", dir=directory)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise RuntimeError(f"Could not write {path}: {e}") from e


def atomic_write_text(path: PathLike, text: str) -> None:
    """UTF-8 text variant of atomic_write_bytes (SVG documents, logs)."""
    atomic_write_bytes(path, text.encode('utf-8'))


def encode_image(
    img: np.ndarray,
    fmt: str = "PNG",
    pil_kwargs: Optional[Dict[str, Any]] = None
) -> bytes:
    """Encode a uint8 image array with Pillow.

    Parameters
    ----------
    img : np.ndarray
        (H, W, 4) RGBA, (H, W, 3) RGB or (H, W) gray, dtype uint8
    fmt : str
        Pillow format name
    pil_kwargs : dict, optional
        Passed to ``Image.save`` (e.g. {"optimize": True})

    Returns
    -------
    bytes
        Encoded file contents

    Notes
    -----
    JPEG has no alpha channel; RGBA input is flattened onto white first so a
    transparent signature background doesn't turn black.
    """
    if img.dtype != np.uint8:
        raise ValueError(f"Image must be uint8, got {img.dtype}")

    image = Image.fromarray(img)
    if fmt == 'JPEG' and image.mode == 'RGBA':
        flattened = Image.new('RGB', image.size, (255, 255, 255))
        flattened.paste(image, mask=image.getchannel('A'))
        image = flattened

    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **(pil_kwargs or {}))
    return buffer.getvalue()


def atomic_save_image(
    img: np.ndarray,
    path: PathLike,
    pil_kwargs: Optional[Dict[str, Any]] = None
) -> None:
    """Encode ``img`` by the extension of ``path`` and write it atomically.

    Raises
    ------
    ValueError
        Extension not in IMAGE_FORMATS
    """
    path = Path(path)
    fmt = IMAGE_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise ValueError(
            f"Unsupported image extension {path.suffix!r}; use one of {sorted(IMAGE_FORMATS)}"
        )
    atomic_write_bytes(path, encode_image(img, fmt, pil_kwargs))


def atomic_yaml_dump(obj: Any, path: PathLike) -> None:
    """Write ``obj`` as block-style YAML, keys in insertion order."""
    text = yaml.safe_dump(obj, default_flow_style=False, sort_keys=False, allow_unicode=True)
    atomic_write_text(path, text)


def load_yaml(path: PathLike) -> Any:
    """Parse a YAML file with ``yaml.safe_load``.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist
    yaml.YAMLError
        If it isn't valid YAML (message names the file)
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"No such YAML file: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"{path}: {e}") from e
