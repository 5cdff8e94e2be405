"""OpenCV classical face recognizer adapters.

Wraps the three recognizers from the ``cv2.face`` contrib module:

- Fisherfaces (LDA over a PCA subspace), needs at least two distinct labels
- Eigenfaces (PCA subspace)
- LBPH (local binary pattern histograms)

Fisher and Eigen need every training and query image to have the same size.
LBPH accepts images of any size.

Note:
    ``cv2.face`` ships with opencv-contrib-python, not with plain opencv-python.
"""
import logging
import sys
from abc import abstractmethod
from typing import Any, Sequence

import cv2
import numpy as np

from core.exceptions import PredictionError, TrainingDataError

from .base import RecognitionModel
from .registry import ModelLoadError, register_model
from .types import Algorithm, ModelInfo, Prediction

logger = logging.getLogger(__name__)

# cv2.face uses DBL_MAX as "no threshold"
NO_THRESHOLD = sys.float_info.max


class OpenCVFaceAdapter(RecognitionModel):
    """Common behaviour of the ``cv2.face`` recognizer adapters.

    Subclasses only declare their algorithm and build the native recognizer.
    """

    algorithm: Algorithm

    def __init__(self, threshold: float = NO_THRESHOLD) -> None:
        self._threshold = float(threshold)
        self._recognizer = None
        self._trained = False

    @property
    def info(self) -> ModelInfo:
        return ModelInfo(
            name=f"{self.algorithm.value.lower()}_faces",
            version=cv2.__version__,
            algorithm=self.algorithm,
        )

    @property
    def is_loaded(self) -> bool:
        return self._recognizer is not None

    @property
    def is_trained(self) -> bool:
        return self._trained

    @abstractmethod
    def _create(self, face_module: Any) -> Any:
        """Build the native recognizer from the ``cv2.face`` module."""
        pass

    def load(self) -> None:
        """Create the native recognizer.

        Raises:
            ModelLoadError: If the cv2.face contrib module is not available.
        """
        if self.is_loaded:
            logger.debug("Recognizer already created, skipping")
            return

        face_module = getattr(cv2, "face", None)
        if face_module is None:
            raise ModelLoadError(
                "cv2.face not available. Install with: "
                "pip install opencv-contrib-python"
            )

        try:
            self._recognizer = self._create(face_module)
        except cv2.error as e:
            raise ModelLoadError(f"Failed to create {self.algorithm.value} recognizer: {e}") from e

        logger.debug(f"Created {self.algorithm.value} recognizer")

    def unload(self) -> None:
        """Release the native recognizer.

        Idempotent - safe to call multiple times.
        """
        self._recognizer = None
        self._trained = False

    def train(self, images: Sequence[np.ndarray], labels: Sequence[int]) -> None:
        if len(images) != len(labels):
            raise TrainingDataError(
                f"Got {len(images)} images but {len(labels)} labels"
            )
        if not images:
            raise TrainingDataError("Cannot train on zero samples")

        if not self.is_loaded:
            self.load()

        label_array = np.asarray(labels, dtype=np.int32)
        try:
            self._recognizer.train(list(images), label_array)
        except cv2.error as e:
            raise TrainingDataError(
                f"{self.algorithm.value} training failed on {len(images)} samples: {e}"
            ) from e

        self._trained = True
        logger.info(
            f"Trained {self.algorithm.value} recognizer on {len(images)} samples, "
            f"{len(np.unique(label_array))} labels"
        )

    def predict(self, image: np.ndarray) -> Prediction:
        if not self._trained:
            raise PredictionError(f"{self.algorithm.value} recognizer is not trained")

        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

        try:
            label, confidence = self._recognizer.predict(image)
        except cv2.error as e:
            raise PredictionError(f"{self.algorithm.value} prediction failed: {e}") from e

        return Prediction(label=int(label), confidence=float(confidence))


@register_model(Algorithm.FISHER)
class FisherFaceAdapter(OpenCVFaceAdapter):
    """Fisherfaces recognizer."""

    algorithm = Algorithm.FISHER

    def __init__(self, num_components: int = 0, threshold: float = NO_THRESHOLD) -> None:
        super().__init__(threshold=threshold)
        self._num_components = int(num_components)

    def _create(self, face_module: Any) -> Any:
        return face_module.FisherFaceRecognizer_create(self._num_components, self._threshold)


@register_model(Algorithm.EIGEN)
class EigenFaceAdapter(OpenCVFaceAdapter):
    """Eigenfaces recognizer."""

    algorithm = Algorithm.EIGEN

    def __init__(self, num_components: int = 0, threshold: float = NO_THRESHOLD) -> None:
        super().__init__(threshold=threshold)
        self._num_components = int(num_components)

    def _create(self, face_module: Any) -> Any:
        return face_module.EigenFaceRecognizer_create(self._num_components, self._threshold)


@register_model(Algorithm.LBPH)
class LBPHFaceAdapter(OpenCVFaceAdapter):
    """Local binary pattern histogram recognizer.

    Attributes:
        _radius: Radius of the circular local binary pattern.
        _neighbors: Number of sample points on the circle.
        _grid_x: Horizontal cells of the histogram grid.
        _grid_y: Vertical cells of the histogram grid.
    """

    algorithm = Algorithm.LBPH

    def __init__(
        self,
        radius: int = 1,
        neighbors: int = 8,
        grid_x: int = 8,
        grid_y: int = 8,
        threshold: float = NO_THRESHOLD,
    ) -> None:
        super().__init__(threshold=threshold)
        self._radius = int(radius)
        self._neighbors = int(neighbors)
        self._grid_x = int(grid_x)
        self._grid_y = int(grid_y)

    def _create(self, face_module: Any) -> Any:
        return face_module.LBPHFaceRecognizer_create(
            self._radius, self._neighbors, self._grid_x, self._grid_y, self._threshold
        )
