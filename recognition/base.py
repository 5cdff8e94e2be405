"""Abstract RecognitionModel interface for training and label prediction."""
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from .types import ModelInfo, Prediction


class RecognitionModel(ABC):
    """Abstract base class for face recognition models.

    Defines the capability a classifier must offer: fit on labeled grayscale
    images, then map one image to an integer label. Implementations wrap a
    native or bound library and must handle creating/releasing it.

    Subclasses must implement all abstract methods and properties.
    """

    @property
    @abstractmethod
    def info(self) -> ModelInfo:
        """Get immutable model metadata."""
        pass

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """Check if the native recognizer has been created.

        Returns:
            True if train/predict can be called, False otherwise.
        """
        pass

    @property
    @abstractmethod
    def is_trained(self) -> bool:
        """Check if the model has been fitted at least once."""
        pass

    @abstractmethod
    def load(self) -> None:
        """Create the native recognizer.

        Multiple calls to load() should be safe (idempotent).

        Raises:
            ModelLoadError: If the backing library is missing or fails.
        """
        pass

    @abstractmethod
    def unload(self) -> None:
        """Release the native recognizer and its trained state.

        Multiple calls to unload() should be safe (idempotent).
        After unload(), is_loaded and is_trained must return False.
        """
        pass

    @abstractmethod
    def train(self, images: Sequence[np.ndarray], labels: Sequence[int]) -> None:
        """Fit the model on labeled images.

        Args:
            images: Grayscale HxW uint8 images.
            labels: Integer label per image, same length as images.

        Raises:
            TrainingDataError: If the inputs are inconsistent or fitting fails.
        """
        pass

    @abstractmethod
    def predict(self, image: np.ndarray) -> Prediction:
        """Predict the label of a single grayscale image.

        Raises:
            PredictionError: If the model is not trained or inference fails.

        Guarantees:
            - Does not modify the trained state, so concurrent calls are safe
              as long as the backing library supports read-only inference.
        """
        pass
