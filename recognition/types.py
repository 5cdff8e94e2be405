"""Algorithm, ModelInfo and Prediction data types for face recognition."""
import hashlib
from dataclasses import dataclass
from enum import Enum

from core.exceptions import ConfigurationError


class Algorithm(str, Enum):
    """Classical face recognition algorithms supported by ``cv2.face``.

    Values are the exact, case-sensitive names accepted in configuration.
    """
    FISHER = "Fisher"
    EIGEN = "Eigen"
    LBPH = "LBPH"

    @classmethod
    def parse(cls, value: "str | Algorithm") -> "Algorithm":
        """Resolve an algorithm by exact name.

        Raises:
            ConfigurationError: If the name is not one of Fisher, Eigen, LBPH.
        """
        if isinstance(value, cls):
            return value
        for algorithm in cls:
            if algorithm.value == value:
                return algorithm
        allowed = ", ".join(a.value for a in cls)
        raise ConfigurationError(
            f"Unknown face recognition algorithm '{value}'. Allowed: {allowed}"
        )


@dataclass(frozen=True)
class ModelInfo:
    """Immutable metadata about a recognition model.

    Attributes:
        name: Model identifier name.
        version: Version string of the backing library.
        algorithm: Algorithm implemented by the model.
    """
    name: str
    version: str
    algorithm: Algorithm

    def fingerprint(self) -> str:
        """Generate a deterministic fingerprint for model identity.

        Returns:
            First 16 characters of SHA256 hash computed from name:version:algorithm.
        """
        content = f"{self.name}:{self.version}:{self.algorithm.value}"
        hash_obj = hashlib.sha256(content.encode("utf-8"))
        return hash_obj.hexdigest()[:16]


@dataclass(frozen=True)
class Prediction:
    """Result of one prediction.

    Attributes:
        label: Predicted integer identity label.
        confidence: Distance reported by the classifier; lower is closer.
    """
    label: int
    confidence: float
