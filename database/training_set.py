"""Labeled training set loaded from a flat directory of face images.

File names carry the label: ``<label>-<anything>.<ext>`` where ``label`` is
an integer and ``ext`` one of jpg, pgm, png (any case). For example
``7-alice-01.png`` is a sample of person 7.
"""
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import yaml

from core.exceptions import ConfigurationError, EmptyTrainingSetError, LabelParseError
from utils.imaging import read_grayscale

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".pgm", ".png")
LABEL_SEPARATOR = "-"
# ASCII digits only; int() alone also takes underscores, spaces and non-ASCII digits.
LABEL_PATTERN = re.compile(r"\+?[0-9]+")


def is_training_image(file_name: str) -> bool:
    """Check whether a file name has an accepted image extension."""
    return file_name.lower().endswith(IMAGE_EXTENSIONS)


def parse_label(file_name: str) -> int:
    """Parse the integer label preceding the first hyphen of a file name.

    Args:
        file_name: Bare file name, e.g. ``"7-sample.png"``.

    Returns:
        The integer label, e.g. ``7``.

    Raises:
        LabelParseError: If there is no hyphen or the prefix is not an integer.
    """
    prefix, separator, _ = file_name.partition(LABEL_SEPARATOR)
    if not separator:
        raise LabelParseError(
            f"Training file '{file_name}' has no '<label>{LABEL_SEPARATOR}' prefix"
        )
    if not LABEL_PATTERN.fullmatch(prefix):
        raise LabelParseError(
            f"Training file '{file_name}' has non-numeric label prefix '{prefix}'"
        )
    return int(prefix)


@dataclass
class TrainingSet:
    """Parallel lists of grayscale images, labels and source paths.

    Guarantees:
        - len(images) == len(labels) == len(paths)
        - labels[i] == parse_label(paths[i].name)
    """
    images: List[np.ndarray] = field(default_factory=list)
    labels: List[int] = field(default_factory=list)
    paths: List[Path] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.labels)

    def add(self, path: Path, image: np.ndarray, label: int) -> None:
        self.paths.append(path)
        self.images.append(image)
        self.labels.append(label)

    @property
    def distinct_labels(self) -> List[int]:
        return sorted(set(self.labels))


def list_training_files(directory: str | Path) -> List[Path]:
    """List accepted image files of a training directory in name order.

    Raises:
        ConfigurationError: If the directory does not exist.
    """
    root = Path(directory)
    if not root.is_dir():
        raise ConfigurationError(f"Training set directory not found: {root}")

    return sorted(
        p for p in root.iterdir()
        if p.is_file() and is_training_image(p.name)
    )


def load_training_set(directory: str | Path) -> TrainingSet:
    """Load every labeled image of a training directory.

    Any failing file fails the whole load; nothing is skipped.

    Raises:
        ConfigurationError: If the directory does not exist.
        EmptyTrainingSetError: If it holds no accepted image.
        LabelParseError: If a file name carries no integer label.
        ImageReadError: If an image cannot be decoded.
    """
    files = list_training_files(directory)
    if not files:
        raise EmptyTrainingSetError(
            f"No {'/'.join(e[1:] for e in IMAGE_EXTENSIONS)} images in {directory}"
        )

    training_set = TrainingSet()
    for path in files:
        label = parse_label(path.name)
        image = read_grayscale(path)
        training_set.add(path, image, label)
        logger.debug(f"Loaded {path.name}: label={label}, shape={image.shape}")

    logger.info(
        f"Loaded training set from {directory}: {len(training_set)} images, "
        f"{len(training_set.distinct_labels)} labels"
    )
    return training_set


def load_label_names(path: Optional[str | Path]) -> Dict[int, str]:
    """Load the optional label -> person name map written next to a training set.

    Returns an empty map when ``path`` is None.

    Raises:
        ConfigurationError: If the file is missing or not a label mapping.
    """
    if path is None:
        return {}

    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Label names file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return {int(label): str(name) for label, name in data.items()}
    except (yaml.YAMLError, AttributeError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid label names file {path}: {e}") from e
