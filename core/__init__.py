"""Core configuration and error types."""
from .config import AppConfig
from .exceptions import (
    ConfigurationError,
    DecodeError,
    EmptyTrainingSetError,
    FaceProcessorError,
    ImageReadError,
    LabelParseError,
    PredictionError,
    TrainingDataError,
)

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "DecodeError",
    "EmptyTrainingSetError",
    "FaceProcessorError",
    "ImageReadError",
    "LabelParseError",
    "PredictionError",
    "TrainingDataError",
]
