#!/usr/bin/env python3
"""
Build a flat, labeled training set from a folder-per-person layout.

    known/
      alice/  a1.jpg a2.png ...
      bob/    b1.jpg ...

becomes

    training/
      0-alice-000.png  0-alice-001.png  1-bob-000.png ...
      labels.yaml      (0: alice, 1: bob)

Images are converted to grayscale and resized to one common size, since the
Fisher and Eigen recognizers need equally sized samples.

Usage:
    python scripts/build_training_set.py --known known --output training --size 92 112
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Tuple

import cv2
import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.exceptions import ImageReadError
from database.training_set import is_training_image
from utils.imaging import read_grayscale, save_matrix

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def build_from_known(
    known_dir: str | Path,
    output_dir: str | Path,
    size: Tuple[int, int] = (92, 112),
) -> Dict[int, str]:
    """Convert a folder-per-person directory into a labeled training set.

    Args:
        known_dir: Directory with one sub-directory of images per person.
        output_dir: Flat output directory, created if missing.
        size: Output image size as (width, height).

    Returns:
        The label -> person name map also written to ``labels.yaml``.
    """
    known_path = Path(known_dir)
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    label_names: Dict[int, str] = {}
    person_dirs = sorted(p for p in known_path.iterdir() if p.is_dir())

    for label, person_dir in enumerate(person_dirs):
        # Hyphens would be read as the end of the label prefix
        name = person_dir.name.replace("-", "_")
        label_names[label] = name

        images = sorted(p for p in person_dir.iterdir() if is_training_image(p.name))
        written = 0
        for img_path in images:
            try:
                img = read_grayscale(img_path)
            except ImageReadError as e:
                logger.warning(f"Skipping {img_path}: {e}")
                continue

            face = cv2.resize(img, size, interpolation=cv2.INTER_AREA)
            save_matrix(output_path / f"{label}-{name}-{written:03d}.png", face)
            written += 1

        logger.info(f"Added {name} as label {label}: {written} images")

    with open(output_path / "labels.yaml", "w") as f:
        yaml.safe_dump(label_names, f)

    logger.info(f"Saved training set with {len(label_names)} people to {output_path}")
    return label_names


def main() -> None:
    parser = argparse.ArgumentParser(description="Build a labeled training set")
    parser.add_argument("--known", default="known", help="Folder-per-person image directory")
    parser.add_argument("--output", default="training", help="Output training directory")
    parser.add_argument(
        "--size", type=int, nargs=2, default=[92, 112], metavar=("WIDTH", "HEIGHT"),
        help="Output image size (default: 92 112)",
    )
    args = parser.parse_args()

    build_from_known(args.known, args.output, size=tuple(args.size))


if __name__ == "__main__":
    main()
