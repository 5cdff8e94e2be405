"""Face recognition processor and its host boundary."""
from .face_recognition_processor import FaceRecognitionProcessor
from .properties import (
    FACE_RECOGNIZER,
    LABEL_NAMES,
    OUTPUT_DIRECTORY,
    SAVE_IMAGES,
    TRAINING_SET,
    AllowableValue,
    ProcessContext,
    PropertyDescriptor,
)
from .session import (
    REL_FAILURE,
    REL_SUCCESS,
    DirectorySession,
    FlowItem,
    InMemorySession,
    ProcessSession,
    Relationship,
)

__all__ = [
    "FaceRecognitionProcessor",
    "FACE_RECOGNIZER",
    "LABEL_NAMES",
    "OUTPUT_DIRECTORY",
    "SAVE_IMAGES",
    "TRAINING_SET",
    "AllowableValue",
    "ProcessContext",
    "PropertyDescriptor",
    "REL_FAILURE",
    "REL_SUCCESS",
    "DirectorySession",
    "FlowItem",
    "InMemorySession",
    "ProcessSession",
    "Relationship",
]
