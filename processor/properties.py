"""Processor property descriptors and validated process context."""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from core.exceptions import ConfigurationError
from recognition.types import Algorithm

logger = logging.getLogger(__name__)

# A validator returns an error message, or None when the value is valid
Validator = Callable[[str], Optional[str]]


def non_empty_validator(value: str) -> Optional[str]:
    if not value.strip():
        return "must not be empty"
    return None


def boolean_validator(value: str) -> Optional[str]:
    if value.lower() not in ("true", "false"):
        return f"'{value}' is not a boolean (true/false)"
    return None


@dataclass(frozen=True)
class AllowableValue:
    """One accepted value of an enumerated property."""
    value: str
    display_name: str
    description: str = ""


@dataclass(frozen=True)
class PropertyDescriptor:
    """Declarative definition of one processor property.

    Attributes:
        name: Human-readable property name.
        key: Key of the property in the ``processor`` config section.
        description: What the property controls.
        default: Value used when the property is not set.
        required: Whether a value (explicit or default) must be present.
        allowable_values: Accepted values; empty means any value.
        validators: Checks applied to a present value.
    """
    name: str
    key: str
    description: str
    default: Optional[str] = None
    required: bool = False
    allowable_values: Tuple[AllowableValue, ...] = ()
    validators: Tuple[Validator, ...] = field(default=(), compare=False)

    def validate(self, value: Optional[str]) -> List[str]:
        """Return the list of problems with a value, empty when valid."""
        if value is None:
            return [f"'{self.name}' is required"] if self.required else []

        problems = []
        for validator in self.validators:
            message = validator(value)
            if message:
                problems.append(f"'{self.name}' {message}")

        if self.allowable_values and value not in {a.value for a in self.allowable_values}:
            allowed = ", ".join(a.value for a in self.allowable_values)
            problems.append(f"'{self.name}' value '{value}' is not one of: {allowed}")
        return problems


FISHER = AllowableValue(
    Algorithm.FISHER.value, "Fisher Face Recognition",
    "Face recognition using the Fisher algorithm.",
)
EIGEN = AllowableValue(
    Algorithm.EIGEN.value, "Eigen Face Recognition",
    "Face recognition using the Eigen algorithm.",
)
LBPH = AllowableValue(
    Algorithm.LBPH.value, "LBPH Face Recognition",
    "Face recognition using the LBPH algorithm.",
)

TRAINING_SET = PropertyDescriptor(
    name="Training Set Directory",
    key="training_set",
    description="Folder holding the labeled training images (<label>-<name>.<jpg|pgm|png>).",
    required=True,
    validators=(non_empty_validator,),
)

FACE_RECOGNIZER = PropertyDescriptor(
    name="Face Recognition Algorithm",
    key="algorithm",
    description="Face recognition algorithm to be applied.",
    default=FISHER.value,
    required=True,
    allowable_values=(FISHER, EIGEN, LBPH),
    validators=(non_empty_validator,),
)

SAVE_IMAGES = PropertyDescriptor(
    name="Save Images",
    key="save_images",
    description="Whether every recognised frame is also written to the output directory.",
    default="true",
    required=True,
    allowable_values=(AllowableValue("true", "true"), AllowableValue("false", "false")),
    validators=(boolean_validator,),
)

OUTPUT_DIRECTORY = PropertyDescriptor(
    name="Output Directory",
    key="output_directory",
    description="Directory where recognised frames are saved.",
    default=".",
    required=True,
    validators=(non_empty_validator,),
)

LABEL_NAMES = PropertyDescriptor(
    name="Label Names File",
    key="label_names",
    description="Optional YAML map of label -> person name used in log messages.",
    validators=(non_empty_validator,),
)


def _to_property_string(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ProcessContext:
    """Validated, read-only view of the processor's property values.

    Raises:
        ConfigurationError: On construction, listing every invalid property.
    """

    def __init__(
        self,
        properties: Mapping[str, Any],
        descriptors: Iterable[PropertyDescriptor],
    ) -> None:
        self._descriptors = {d.key: d for d in descriptors}
        self._values: Dict[str, Optional[str]] = {}

        unknown = set(properties) - set(self._descriptors)
        if unknown:
            logger.warning(f"Ignoring unknown processor properties: {sorted(unknown)}")

        problems = []
        for key, descriptor in self._descriptors.items():
            value = _to_property_string(properties.get(key))
            if value is None:
                value = descriptor.default
            problems.extend(descriptor.validate(value))
            self._values[key] = value

        if problems:
            raise ConfigurationError("Invalid processor configuration: " + "; ".join(problems))

    def get(self, descriptor: PropertyDescriptor) -> Optional[str]:
        """Get a property value (explicit or default)."""
        if descriptor.key not in self._descriptors:
            raise KeyError(f"Unsupported property: {descriptor.name}")
        return self._values[descriptor.key]

    def as_boolean(self, descriptor: PropertyDescriptor) -> bool:
        value = self.get(descriptor)
        return value is not None and value.lower() == "true"
