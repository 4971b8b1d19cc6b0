#!/usr/bin/env python3
"""Render a stored signature to PNG, JPEG, WebP or SVG.

CLI tool that replays a strokes.v1 YAML file through the stroke fitter and
writes the result with the raster (PNG, JPEG, WebP) or vector (SVG) backend.
JPEG has no alpha channel, so a transparent background comes out white.

Usage:
    # PNG with default pad settings
    python scripts/render_signature.py --strokes_file signature.yaml --output out/signature.png

    # JPEG for an email attachment
    python scripts/render_signature.py --strokes_file signature.yaml --output out/signature.jpg

    # SVG with a custom pad config and background rect
    python scripts/render_signature.py --strokes_file signature.yaml \
        --config configs/pad.v1.yaml --output out/signature.svg --background

Outputs:
    - The rendered file (format from --format, else from the output extension)
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from inkpad.pad import SignaturePad
from inkpad.stroke_fitting.model import load_groups
from inkpad.utils import fs, logging_config, validators

# Raster formats come from fs.IMAGE_FORMATS; svg goes through the vector backend
FORMATS = tuple(ext.lstrip('.') for ext in fs.IMAGE_FORMATS) + ('svg',)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a stored signature (strokes.v1 YAML) to PNG, JPEG, WebP or SVG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--strokes_file',
        type=str,
        required=True,
        help='Path to strokes.v1 YAML file'
    )
    parser.add_argument(
        '--output',
        type=str,
        required=True,
        help='Output file path (.png, .jpg, .jpeg, .webp or .svg)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Pad config (pad.v1 YAML); built-in defaults if omitted'
    )
    parser.add_argument(
        '--format',
        type=str,
        default=None,
        choices=FORMATS,
        help='Output format; inferred from --output extension if omitted'
    )
    parser.add_argument(
        '--background',
        action='store_true',
        help='SVG only: include a background rect in the configured color'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    return parser.parse_args(argv)


def render_signature(
    strokes_file: str,
    output: str,
    config: Optional[str] = None,
    fmt: Optional[str] = None,
    background: bool = False
) -> Dict[str, Any]:
    """Replay a strokes file and write the rendered output.

    Returns
    -------
    dict
        {"output": str, "format": str, "groups": int, "render_time_s": float}

    Raises
    ------
    ValueError
        Unknown format, or invalid config / strokes file
    FileNotFoundError
        Missing strokes or config file
    """
    logger = logging.getLogger(__name__)

    output_path = Path(output)
    fmt = fmt or output_path.suffix.lstrip('.').lower()
    if fmt not in FORMATS:
        raise ValueError(f"Cannot infer output format from {output_path.name!r}; use --format")

    cfg = validators.load_pad_config(config) if config else validators.PadConfigV1()
    pad = SignaturePad.from_config(cfg)

    with logging_config.log_context(strokes_file=Path(strokes_file).name):
        groups = load_groups(strokes_file)
        logger.info(f"Rendering {len(groups)} group(s) as {fmt.upper()}")

        start_time = time.time()
        if fmt == 'svg':
            svg = pad.render(groups, backend='vector', include_background=background)
            fs.atomic_write_text(output_path, svg)
        else:
            surface = pad.render(groups, backend='raster')
            image_format = fs.IMAGE_FORMATS['.' + fmt]
            fs.atomic_write_bytes(output_path, fs.encode_image(surface.to_rgba8(), image_format))
        render_time = time.time() - start_time

        logger.info(f"Saved {output_path} in {render_time:.3f}s")

    return {
        'output': str(output_path),
        'format': fmt,
        'groups': len(groups),
        'render_time_s': render_time,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    log_level = "DEBUG" if args.verbose else "INFO"
    logging_config.setup_logging(log_level=log_level, quiet_libs=["PIL"], context={"app": "render"})
    logging_config.install_excepthook()
    logger = logging.getLogger(__name__)

    try:
        render_signature(
            args.strokes_file,
            args.output,
            config=args.config,
            fmt=args.format,
            background=args.background,
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1
    finally:
        logging_config.shutdown()

    return 0


if __name__ == '__main__':
    sys.exit(main())
