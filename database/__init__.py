"""Labeled training data for face recognition."""
from .training_set import (
    TrainingSet,
    is_training_image,
    list_training_files,
    load_label_names,
    load_training_set,
    parse_label,
)

__all__ = [
    "TrainingSet",
    "is_training_image",
    "list_training_files",
    "load_label_names",
    "load_training_set",
    "parse_label",
]
