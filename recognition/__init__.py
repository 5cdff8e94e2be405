"""Recognition module - classical face recognition models."""

from .base import RecognitionModel
from .registry import ModelLoadError, ModelNotFoundError, ModelRegistry, register_model, registry
from .types import Algorithm, ModelInfo, Prediction

# Import adapters to trigger registration
from . import opencv_adapters  # noqa: F401

__all__ = [
    "Algorithm",
    "ModelInfo",
    "ModelLoadError",
    "ModelNotFoundError",
    "ModelRegistry",
    "Prediction",
    "RecognitionModel",
    "register_model",
    "registry",
]
