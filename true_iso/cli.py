"""
Command line interface for true-iso.

Corrects a single isometric sprite and writes the result next to the
input (or to --output).
"""

import argparse
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import ValidationError

from . import __version__
from .config import get_config, get_correction_config
from .config.models import RatioSpec
from .image_processing import ImageDecodeError, load_image, save_image
from .services import CorrectionService, NoVisibleContentError
from .utils.logger import setup_from_config, setup_logging


def default_output_path(input_path: Path) -> Path:
    """<stem>_corrected.png in the input's directory."""
    return input_path.parent / f"{input_path.stem}_corrected.png"


def parse_ratio(text: str) -> RatioSpec:
    """argparse type for N:M ratios."""
    try:
        return RatioSpec.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='true-iso',
        description='Correct isometric tile sprites to mathematically consistent proportions.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Correct to 2:1 and resize to 256px
  true-iso tile.png

  # Custom ratio, size and output path
  true-iso tile.png -r 1.732:1 -s 128 -o fixed/tile.png --verbose
        '''
    )
    parser.add_argument('input', type=Path, help='Input image path (PNG with alpha)')
    parser.add_argument('--output', '-o', type=Path, default=None, help='Output path (default: <input>_corrected.png)')
    parser.add_argument('--ratio', '-r', type=parse_ratio, default=None, help='Target isometric ratio, e.g. "2:1" (default from config)')
    parser.add_argument('--size', '-s', type=int, default=None, help='Output size, longest side in pixels (default from config)')
    parser.add_argument('--config', '-c', type=Path, default=None, help='YAML config file replacing the packaged defaults')
    parser.add_argument('--verbose', action='store_true', help='Show detection details')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def print_matrix(matrix: List[List[float]]):
    print("Correction matrix:")
    for row in matrix:
        print("  [" + ", ".join(f"{v:8.4f}" for v in row) + "]")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments (defaults to sys.argv[1:])

    Returns:
        Process exit code (0 on success, 1 on error)
    """
    args = build_parser().parse_args(argv)

    try:
        loader = get_config(args.config)
        setup_from_config(loader)
        if args.verbose:
            setup_logging(log_level="INFO", log_format="%(message)s")
        config = get_correction_config()
    except (FileNotFoundError, ValidationError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    size = args.size if args.size is not None else config.output_size
    if size < 1:
        print(f"Error: --size must be positive, got {size}", file=sys.stderr)
        return 1
    ratio = args.ratio or config.target_ratio
    output_path = args.output or default_output_path(args.input)

    try:
        image = load_image(args.input)
    except (FileNotFoundError, ImageDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    height, width = image.shape[:2]
    if args.verbose:
        print(f"Loaded image: {args.input} ({width}x{height})")
        print(f"Target ratio: {ratio}")
        print(f"Target angle: {ratio.target_angle_degrees:.3f}°")

    service = CorrectionService(config)
    try:
        corrected, diagnostics = service.correct_sprite(
            image,
            ratio=ratio,
            output_size=size,
            verbose=args.verbose,
            sprite_name=args.input.name
        )
    except NoVisibleContentError as e:
        print(f"Error: Failed to detect isometric geometry: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Sprite bounds: {diagnostics.bounds}")
        print(f"Lines: {diagnostics.line_count} detected, "
              f"{diagnostics.left.line_count} left-sloping, {diagnostics.right.line_count} right-sloping")
        print(f"Confidence: left={diagnostics.left.confidence:.2f}, right={diagnostics.right.confidence:.2f}")

    print(f"Detected angles: left={diagnostics.left.angle_degrees:.2f}°, right={diagnostics.right.angle_degrees:.2f}°")
    print(f"Target angles: left=-{ratio.target_angle_degrees:.3f}°, right=+{ratio.target_angle_degrees:.3f}°")

    if diagnostics.already_correct:
        print(f"Image already has correct isometric proportions (within {config.tolerance_degrees:.1f}° tolerance)")
    elif args.verbose and diagnostics.correction_matrix is not None:
        print_matrix(diagnostics.correction_matrix)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        save_image(corrected, output_path)
    except (OSError, ValueError) as e:
        print(f"Error: Failed to save output: {output_path}: {e}", file=sys.stderr)
        return 1

    if diagnostics.already_correct:
        print(f"Saved (angles unchanged, cropped & resized): {output_path}")
    else:
        print(f"Saved corrected image: {output_path}")
    print(f"Dimensions: {width}x{height} -> {diagnostics.output_size[0]}x{diagnostics.output_size[1]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
