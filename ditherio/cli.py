"""Command-line interface for ditherio.

Decodes an image, dithers it and writes the result. ``--json`` switches to a
single machine-readable result document on stdout.
"""

from __future__ import annotations

import argparse
import json
import sys
import traceback
from pathlib import Path
from typing import NoReturn

from ditherio.core.kernels import KERNELS, KernelName
from ditherio.core.palette import PALETTES, PaletteName


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ditherio",
        description="Reduce an image to a fixed palette with error diffusion dithering.",
    )
    parser.add_argument("input", nargs="?", help="Input image file path.")
    parser.add_argument(
        "-o", "--output",
        help="Output file path. Defaults to <input>_dithered.png.",
    )
    parser.add_argument(
        "--kernel",
        choices=[k.value for k in KernelName],
        default=KernelName.BURKES.value,
        help="Error diffusion kernel (default: burkes).",
    )
    parser.add_argument(
        "--palette",
        choices=[p.value for p in PaletteName],
        default=PaletteName.MONOCHROME.value,
        help="Palette strategy (default: mono).",
    )
    parser.add_argument(
        "--colors",
        help="Custom palette as comma-separated hex colors, e.g. '#000,#fff,#f00'. "
        "Overrides --palette.",
    )
    parser.add_argument(
        "--width",
        type=int,
        help="Resize to this width before dithering.",
    )
    parser.add_argument(
        "--height",
        type=int,
        help="Resize to this height before dithering.",
    )
    parser.add_argument(
        "--preserve-alpha",
        action="store_true",
        help="Keep source alpha with the mono palette instead of forcing opaque. "
        "Cannot be combined with --colors.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available kernels and palettes and exit.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error.",
    )
    return parser


def _auto_output_path(input_path: Path) -> Path:
    """Generate default output path from input."""
    return input_path.parent / f"{input_path.stem}_dithered.png"


def _fail(message: str, code: str, is_json: bool) -> NoReturn:
    """Report an error on stderr (plain or JSON) and exit with code 1."""
    if is_json:
        err = {"status": "error", "error": message, "code": code}
        print(json.dumps(err), file=sys.stderr)
    else:
        print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _print_listing(is_json: bool) -> None:
    kernels = {
        name.value: {"shift": k.shift, "weights": k.total_weight, "taps": len(k.entries)}
        for name, k in KERNELS.items()
    }
    palettes = {name.value: len(p) for name, p in PALETTES.items()}
    if is_json:
        print(json.dumps({"kernels": kernels, "palettes": palettes}, indent=2))
        return
    print("Kernels:")
    for name, info in kernels.items():
        print(f"  {name:<16} {info['weights']}/{1 << info['shift']} over {info['taps']} neighbors")
    print("Palettes:")
    for name, count in palettes.items():
        print(f"  {name:<16} {count} colors")


def _run(args: argparse.Namespace) -> None:
    """Run the decode -> dither -> encode pipeline."""
    from ditherio.core.processor import Settings, process_image, resolve_palette
    from ditherio.core.reader import load_image
    from ditherio.core.writer import detect_format, save_image

    is_json = args.json
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        _fail(f"File not found: {input_path}", "FILE_NOT_FOUND", is_json)

    if args.output:
        output_path = Path(args.output).resolve()
    else:
        output_path = _auto_output_path(input_path)

    colors = tuple(c for c in (args.colors or "").split(",") if c.strip())
    settings = Settings(
        kernel=KernelName(args.kernel),
        palette=PaletteName(args.palette),
        colors=colors,
        width=args.width,
        height=args.height,
        preserve_alpha=args.preserve_alpha,
    )

    # Validate options before doing any decoding work
    try:
        detect_format(output_path)
        if settings.colors:
            resolve_palette(settings)
        for dim in (settings.width, settings.height):
            if dim is not None and dim <= 0:
                raise ValueError(f"Size must be positive, got {dim}")
    except ValueError as e:
        _fail(str(e), "INVALID_OPTION", is_json)

    try:
        image = load_image(input_path)
    except FileNotFoundError as e:
        _fail(str(e), "FILE_NOT_FOUND", is_json)
    except (ValueError, OSError) as e:
        _fail(str(e), "INVALID_INPUT", is_json)

    height, width = image.shape[:2]
    if not is_json:
        print(
            f"Dithering {input_path.name} ({width}x{height}) "
            f"with {settings.kernel.value} / "
            f"{'custom' if settings.colors else settings.palette.value}...",
            file=sys.stderr,
        )

    result = process_image(image, settings)

    try:
        save_image(result, output_path)
    except OSError as e:
        if args.debug:
            traceback.print_exc(file=sys.stderr)
        _fail(str(e), "WRITE_FAILED", is_json)

    if not is_json:
        print(f"Saved to {output_path}", file=sys.stderr)
    else:
        out_h, out_w = result.shape[:2]
        summary = {
            "status": "success",
            "input": str(input_path),
            "output": str(output_path),
            "settings": {
                "kernel": settings.kernel.value,
                "palette": "custom" if settings.colors else settings.palette.value,
                "colors": list(settings.colors),
                "preserve_alpha": settings.preserve_alpha,
            },
            "metadata": {
                "input_size": [width, height],
                "output_size": [out_w, out_h],
                "output_format": output_path.suffix.lstrip("."),
            },
        }
        print(json.dumps(summary, indent=2))


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.list:
        _print_listing(args.json)
        return
    if not args.input:
        parser.error("the following arguments are required: input")
    try:
        _run(args)
    except Exception as e:
        if args.debug:
            traceback.print_exc(file=sys.stderr)
        _fail(f"Unexpected error: {e}", "PROCESSING_ERROR", args.json)


if __name__ == "__main__":
    main()
