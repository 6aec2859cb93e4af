"""
Command-line entry point: bundle image files into images.pdf.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .session import BundleSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-image-bundle",
        description=(
            "Create a PDF with one page per image. Each page shows the image "
            "file name as a title and a watermark on the image."
        ),
    )
    parser.add_argument(
        "images", nargs="+", help="JPEG or PNG files, in the order they should appear"
    )
    parser.add_argument(
        "-o", "--output-dir", default=".", help="Directory to write images.pdf to"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log per-image processing details"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    session = BundleSession()
    session.progress.listeners.append(
        lambda percent: logger.info(f"Progress: {round(percent)}%")
    )

    added = session.selection.add_files(args.images)
    if not added:
        logger.error("No supported images given (accepted: .jpg, .jpeg, .png)")
        return 1

    logger.info(
        f"Selected {len(session.selection)} images ({session.selection.total_size_mb:.2f} MB)"
    )
    output_path = session.generate(args.output_dir)

    if output_path is None:
        return 1

    logger.info(f"✓ PDF written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
