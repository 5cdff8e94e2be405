"""ModelRegistry singleton pattern"""
from typing import Any, Dict, Optional, Type
from threading import Lock
import logging

from core.exceptions import ConfigurationError

from .base import RecognitionModel
from .types import Algorithm

logger = logging.getLogger(__name__)


class ModelNotFoundError(Exception):
    """Raised when model is not found in registry."""
    pass


class ModelLoadError(Exception):
    """Raised when model fails to load."""
    pass


class ModelRegistry:
    """Thread-safe registry mapping algorithms to recognition model classes."""

    _instance: Optional["ModelRegistry"] = None
    _lock: Lock = Lock()
    _models_lock: Lock = Lock()

    def __new__(cls) -> "ModelRegistry":
        """Singleton pattern implementation."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        """Initialize registry."""
        if self._initialized:
            return
        self._model_classes: Dict[Algorithm, Type[RecognitionModel]] = {}
        self._initialized = True

    def register(self, algorithm: Algorithm, model_class: Type[RecognitionModel]) -> None:
        """Register a model class for an algorithm."""
        with self._models_lock:
            if algorithm in self._model_classes:
                logger.warning(f"Overwriting registered model: {algorithm.value}")
            self._model_classes[algorithm] = model_class
            logger.debug(f"Registered model: {algorithm.value}")

    def create(self, algorithm: "Algorithm | str", **params: Any) -> RecognitionModel:
        """Instantiate and load a fresh, untrained model.

        Every call returns a new instance; ownership of the shared, trained
        model belongs to the caller.

        Args:
            algorithm: Algorithm or its exact name.
            **params: Constructor parameters for the model class.

        Raises:
            ConfigurationError: If the algorithm name is unknown or the
                parameters do not fit the model's constructor.
            ModelNotFoundError: If no model class is registered for it.
            ModelLoadError: If the model cannot be loaded.
        """
        algorithm = Algorithm.parse(algorithm)
        with self._models_lock:
            if algorithm not in self._model_classes:
                raise ModelNotFoundError(f"Model '{algorithm.value}' not found in registry")
            model_class = self._model_classes[algorithm]

        try:
            instance = model_class(**params)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid parameters for model '{algorithm.value}': {e}"
            ) from e

        try:
            instance.load()
        except ModelLoadError:
            raise
        except Exception as e:
            raise ModelLoadError(f"Failed to load model '{algorithm.value}': {str(e)}") from e

        logger.info(f"Created model: {instance.info.name}")
        return instance

    def get_class(self, algorithm: "Algorithm | str") -> Type[RecognitionModel]:
        """Get the registered model class for an algorithm."""
        algorithm = Algorithm.parse(algorithm)
        with self._models_lock:
            if algorithm not in self._model_classes:
                raise ModelNotFoundError(f"Model '{algorithm.value}' not found in registry")
            return self._model_classes[algorithm]

    def list_models(self) -> Dict[str, Type[RecognitionModel]]:
        """List all registered model classes by algorithm name."""
        with self._models_lock:
            return {a.value: cls for a, cls in self._model_classes.items()}


def register_model(algorithm: Algorithm) -> Any:
    """Decorator for registering a model class."""
    def decorator(cls: Type[RecognitionModel]) -> Type[RecognitionModel]:
        registry = ModelRegistry()
        registry.register(algorithm, cls)
        return cls
    return decorator


# Singleton instance
registry = ModelRegistry()
