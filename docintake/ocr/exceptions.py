class OcrError(Exception):
    """Base exception for page rasterization and text recognition."""


class RasterizationError(OcrError):
    """Raised when a document page cannot be converted to an image."""


class RecognitionError(OcrError):
    """Raised when the OCR engine fails to recognize text."""
