"""Face recognition processor for a flow-based processing host.

Takes video frames holding a detected face, predicts whose face it is with a
classical recognizer trained on a labeled image directory, and optionally
saves every recognised frame.
"""
import logging
import time
from pathlib import Path
from threading import Lock
from typing import Callable, Dict, FrozenSet, List, Optional

import numpy as np

from core.config import AppConfig
from core.exceptions import DecodeError, PredictionError
from database.training_set import load_label_names, load_training_set
from recognition import registry
from recognition.base import RecognitionModel
from recognition.types import Algorithm, Prediction
from utils.imaging import decode_image, save_matrix, to_matrix

from .properties import (
    FACE_RECOGNIZER,
    LABEL_NAMES,
    OUTPUT_DIRECTORY,
    SAVE_IMAGES,
    TRAINING_SET,
    ProcessContext,
    PropertyDescriptor,
)
from .session import REL_FAILURE, REL_SUCCESS, FlowItem, ProcessSession, Relationship

logger = logging.getLogger(__name__)

ModelFactory = Callable[[Algorithm], RecognitionModel]


class FaceRecognitionProcessor:
    """Recognises faces in incoming frames.

    The classifier is trained once, on first use or when the processor is
    scheduled, and shared by every later trigger. Creation is guarded by a
    lock, so concurrent first triggers still run exactly one training pass.
    Prediction runs outside the lock.

    A configuration or training failure is remembered and re-raised by every
    later trigger until ``on_stopped()`` resets the processor. Decode and
    prediction failures only fail the item at hand.

    Example:
        >>> processor = FaceRecognitionProcessor(AppConfig.from_yaml("config/processor.yaml"))
        >>> processor.on_scheduled()
        >>> session = InMemorySession([FlowItem(content=png_bytes)])
        >>> processor.on_trigger(session)
        >>> session.transferred(REL_SUCCESS)[0].attributes["face.label"]
        '7'
    """

    TAGS = ("face", "recognition", "opencv")
    CAPABILITY_DESCRIPTION = (
        "Takes as input video frames with detected human faces and recognises these faces."
    )

    LABEL_ATTRIBUTE = "face.label"
    CONFIDENCE_ATTRIBUTE = "face.confidence"
    NAME_ATTRIBUTE = "face.name"
    SAVED_PATH_ATTRIBUTE = "face.saved_path"
    ERROR_ATTRIBUTE = "face.error"

    # Spelling kept: downstream consumers match on this suffix
    SAVED_IMAGE_SUFFIX = "-reognised.png"

    _properties: List[PropertyDescriptor] = [
        TRAINING_SET,
        FACE_RECOGNIZER,
        SAVE_IMAGES,
        OUTPUT_DIRECTORY,
        LABEL_NAMES,
    ]
    _relationships: FrozenSet[Relationship] = frozenset({REL_SUCCESS, REL_FAILURE})

    def __init__(
        self,
        config: AppConfig,
        model_factory: Optional[ModelFactory] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize processor.

        Args:
            config: Application config; processor properties are read from
                its ``processor`` section, model parameters from
                ``recognition.models.<Algorithm>``.
            model_factory: Builds an untrained model for an algorithm.
                Defaults to the model registry.
            clock: Time source in seconds, used to name saved frames.
        """
        self.config = config
        self._model_factory = model_factory or self._create_model
        self._clock = clock

        self._model_lock = Lock()
        self._model: Optional[RecognitionModel] = None
        self._context: Optional[ProcessContext] = None
        self._label_names: Dict[int, str] = {}
        self._startup_error: Optional[Exception] = None

        logger.info("Initialisation complete!")

    def get_relationships(self) -> FrozenSet[Relationship]:
        return self._relationships

    def get_supported_property_descriptors(self) -> List[PropertyDescriptor]:
        return list(self._properties)

    @property
    def model(self) -> Optional[RecognitionModel]:
        """The shared trained model, or None before the first training pass."""
        return self._model

    def _create_model(self, algorithm: Algorithm) -> RecognitionModel:
        params = self.config.get_model_config(algorithm.value)
        return registry.create(algorithm, **params)

    def create_context(self) -> ProcessContext:
        """Validate the configured processor properties.

        Raises:
            ConfigurationError: If any property is missing or invalid.
        """
        return ProcessContext(self.config.get_processor_properties(), self._properties)

    def train(self, training_dir: str | Path, algorithm: "Algorithm | str") -> RecognitionModel:
        """Train a new model on a training directory.

        The algorithm is resolved by exact name; each name yields exactly
        its own model type.

        Raises:
            ConfigurationError: If the directory or algorithm is invalid.
            TrainingDataError: If the training set is empty, mislabeled,
                unreadable, or the model cannot be fitted on it.
        """
        algorithm = Algorithm.parse(algorithm)
        training_set = load_training_set(training_dir)

        logger.info(
            f"Training {algorithm.value} recognizer on {len(training_set)} images "
            f"from {training_dir}"
        )
        model = self._model_factory(algorithm)
        model.train(training_set.images, training_set.labels)
        return model

    def ensure_model(self) -> RecognitionModel:
        """Return the shared model, training it on first call.

        Raises:
            ConfigurationError, TrainingDataError: On the first failing call
                and, re-raised unchanged, on every call after it.
        """
        if self._model is not None:
            return self._model

        with self._model_lock:
            if self._model is not None:
                return self._model
            if self._startup_error is not None:
                raise self._startup_error

            try:
                context = self.create_context()
                label_names = load_label_names(context.get(LABEL_NAMES))
                model = self.train(context.get(TRAINING_SET), context.get(FACE_RECOGNIZER))
            except Exception as e:
                logger.error(f"Processor startup failed: {e}")
                self._startup_error = e
                raise

            self._context = context
            self._label_names = label_names
            self._model = model
            return model

    def on_scheduled(self) -> None:
        """Train eagerly so configuration and training errors abort startup."""
        model = self.ensure_model()
        logger.info(f"Processor scheduled with model {model.info.name} ({model.info.fingerprint()})")

    def on_stopped(self) -> None:
        """Release the model; the next trigger trains again from scratch."""
        with self._model_lock:
            if self._model is not None:
                self._model.unload()
            self._model = None
            self._context = None
            self._label_names = {}
            self._startup_error = None
        logger.info("Processor stopped, model released")

    def on_trigger(self, session: ProcessSession) -> None:
        """Recognise the face in the next item of the session, if any.

        Raises:
            ConfigurationError, TrainingDataError: If the model cannot be built.
        """
        model = self.ensure_model()

        item = session.get()
        if item is None:
            return
        self._process(session, model, item)

    def run(self, session: ProcessSession) -> int:
        """Trigger until the session is drained. Returns the items processed."""
        model = self.ensure_model()
        processed = 0
        while True:
            item = session.get()
            if item is None:
                logger.info(f"Session drained after {processed} items")
                return processed
            self._process(session, model, item)
            processed += 1

    def _process(self, session: ProcessSession, model: RecognitionModel, item: FlowItem) -> None:
        try:
            image = decode_image(session.read(item))
            prediction = model.predict(to_matrix(image))
        except (DecodeError, PredictionError) as e:
            self._fail(session, item, e)
            return

        logger.info(f"Predicted label: {prediction.label}")
        self._annotate(session, item, prediction)

        if self._context.as_boolean(SAVE_IMAGES):
            try:
                path = self._save_frame(to_matrix(image, grayscale=False))
            except OSError as e:
                self._fail(session, item, e)
                return
            session.put_attribute(item, self.SAVED_PATH_ATTRIBUTE, str(path))

        session.transfer(item, REL_SUCCESS)

    def _annotate(self, session: ProcessSession, item: FlowItem, prediction: Prediction) -> None:
        session.put_attribute(item, self.LABEL_ATTRIBUTE, str(prediction.label))
        session.put_attribute(item, self.CONFIDENCE_ATTRIBUTE, f"{prediction.confidence:.4f}")
        name = self._label_names.get(prediction.label)
        if name is not None:
            session.put_attribute(item, self.NAME_ATTRIBUTE, name)
            logger.info(f"Recognised {name} (label {prediction.label})")

    def _fail(self, session: ProcessSession, item: FlowItem, error: Exception) -> None:
        logger.error(f"Failed to recognise item {item.id}: {error}")
        session.put_attribute(item, self.ERROR_ATTRIBUTE, str(error))
        session.transfer(item, REL_FAILURE)

    def _save_frame(self, frame: np.ndarray) -> Path:
        output_dir = Path(self._context.get(OUTPUT_DIRECTORY))
        output_dir.mkdir(parents=True, exist_ok=True)
        millis = int(self._clock() * 1000)
        path = save_matrix(output_dir / f"{millis}{self.SAVED_IMAGE_SUFFIX}", frame)
        logger.debug(f"Saved recognised frame to {path}")
        return path
