class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class InvalidUploadError(ProcessorError):
    """Raised when an upload is missing its file or required metadata."""


class DuplicateDocumentError(ProcessorError):
    """Raised when a document with the same content fingerprint already exists."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""
