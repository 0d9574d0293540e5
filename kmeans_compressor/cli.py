"""
Command-line entry point: compress an image to K colors.

Usage:
    kmeans-compress --input Imagen.png --colors 16
    kmeans-compress --prompt            # ask for K on stdin
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .compression import CompressionResult, compress_image, default_output_path
from .config import CompressionConfig
from .exceptions import ImageIOError, InvalidParameter


logger = logging.getLogger(__name__)

DEFAULT_INPUT = 'Imagen.png'
DEFAULT_COLORS = 16
DEFAULT_ITERATIONS = 10


def parse_cluster_count(value: Optional[str], default: int = DEFAULT_COLORS) -> int:
    """
    Read K from user input, falling back to the default when it is
    missing or not a number.
    """
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Invalid number of colors %r, using %d", value, default)
        return default


def prompt_cluster_count(default: int = DEFAULT_COLORS) -> int:
    print(f"Enter the number of colors in the compressed image. Default = {default}")
    try:
        line = input()
    except EOFError:
        return default
    return parse_cluster_count(line, default)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='kmeans-compress',
        description='Reduce the colors of an image with K-means clustering'
    )

    parser.add_argument('--input', type=str, default=DEFAULT_INPUT,
                        help=f'Path to the input image (default: {DEFAULT_INPUT})')

    parser.add_argument('--colors', type=str, default=None,
                        help=f'Number of colors K (default: {DEFAULT_COLORS}; '
                             'non-numeric values fall back to the default)')

    parser.add_argument('--prompt', action='store_true',
                        help='Ask for the number of colors on stdin')

    parser.add_argument('--iterations', type=int, default=DEFAULT_ITERATIONS,
                        help=f'Number of K-means iterations (default: {DEFAULT_ITERATIONS})')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducible output')

    parser.add_argument('--output-dir', type=str, default='.',
                        help='Directory for compressed_<K>_colors.png (default: current directory)')

    parser.add_argument('--format', type=str, default='png', dest='output_format',
                        help='Lossless output format: png, bmp, tiff or ppm (default: png)')

    parser.add_argument('--stop-on-convergence', action='store_true',
                        help='Stop early once assignments no longer change')

    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log output (-v info, -vv debug)')

    return parser.parse_args(argv)


def print_color_usage(result: CompressionResult) -> None:
    print("Color usage:")
    for entry in result.color_usage():
        print(f"Label {entry['color_label']}: RGB {entry['color_rgb']} - "
              f"{entry['count']} px ({entry['percentage']:.2f}%)")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if args.prompt:
        n_clusters = prompt_cluster_count()
    else:
        n_clusters = parse_cluster_count(args.colors)

    try:
        config = CompressionConfig(
            n_clusters=n_clusters,
            n_iter=args.iterations,
            random_state=args.seed,
            stop_on_convergence=args.stop_on_convergence,
            output_format=args.output_format
        )
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = default_output_path(config.n_clusters, output_dir, config.output_format)

        result = compress_image(args.input, output_path, config)
    except InvalidParameter as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ImageIOError as e:
        print(f"I/O error: {e}", file=sys.stderr)
        print(f"Make sure '{args.input}' exists and the output directory is writable.",
              file=sys.stderr)
        return 1
    except OSError as e:
        print(f"I/O error: cannot create output directory {args.output_dir}: {e}",
              file=sys.stderr)
        return 1

    print(f"Compressed image saved as: {result.output_path}")
    print_color_usage(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
