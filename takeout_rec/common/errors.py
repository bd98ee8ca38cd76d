"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for conversion failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class LoadError(PipelineError):
    """Raised when the source document cannot be read or has the wrong shape."""

    error_code = "LOAD_ERROR"


class TransformError(PipelineError):
    """Raised when a source row cannot be normalised."""

    error_code = "TRANSFORM_ERROR"

    def __init__(self, message: str, *, row_index: int | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.row_index = row_index
        self.field = field


class MissingFieldError(TransformError):
    error_code = "MISSING_FIELD"


class FieldTypeError(TransformError):
    error_code = "FIELD_TYPE_MISMATCH"


class TimestampParseError(TransformError):
    error_code = "UNPARSEABLE_TIMESTAMP"


class WriteError(PipelineError):
    """Raised when a bucket file cannot be created or written."""

    error_code = "WRITE_ERROR"
