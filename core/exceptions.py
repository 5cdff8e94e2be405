"""Exception hierarchy for the face recognition processor.

Configuration and training errors are fatal to the processing stage.
Decode and prediction errors are scoped to the single item being processed.
"""


class FaceProcessorError(Exception):
    """Base exception for face recognition processor operations."""
    pass


class ConfigurationError(FaceProcessorError):
    """Raised when a processor property is missing, empty or invalid."""
    pass


class TrainingDataError(FaceProcessorError):
    """Raised when the training set cannot be turned into a fitted model."""
    pass


class LabelParseError(TrainingDataError):
    """Raised when a training file name has no parseable integer label."""
    pass


class EmptyTrainingSetError(TrainingDataError):
    """Raised when the training directory holds no accepted image files."""
    pass


class ImageReadError(TrainingDataError):
    """Raised when a training image cannot be read or decoded."""
    pass


class DecodeError(FaceProcessorError):
    """Raised when an incoming item is not a decodable image."""
    pass


class PredictionError(FaceProcessorError):
    """Raised when the classifier fails to predict a label."""
    pass
