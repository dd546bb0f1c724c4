"""Error taxonomy for the classification pipeline."""


class ImageRecognitionError(Exception):
    """Base class for every fatal pipeline error."""


class UsageError(ImageRecognitionError):
    """Bad or missing command line argument."""


class NetworkError(ImageRecognitionError):
    """Image could not be fetched."""


class ModelLoadError(ImageRecognitionError):
    """Classification graph is missing or malformed."""


class LabelLoadError(ImageRecognitionError):
    """Label file is missing or unreadable."""


class DecodeError(ImageRecognitionError):
    """Image bytes are not a decodable JPEG."""


class InferenceError(ImageRecognitionError):
    """Graph execution failed."""


class ShapeError(InferenceError):
    """Graph output is not a rank-2 float array."""


class TooFewResultsError(ImageRecognitionError):
    """Fewer labeled probabilities than requested."""
