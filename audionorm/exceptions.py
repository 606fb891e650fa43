"""Custom exception hierarchy for audionorm."""


class AudioNormError(Exception):
    """Base exception for all audionorm errors."""

    def __init__(self, message, error_code=None, details=None, original_error=None):
        self.message = message
        self.error_code = error_code or "UNKNOWN"
        self.details = details or {}
        self.original_error = original_error

        full_message = f"[{self.error_code}] {message}"
        if details:
            full_message += f"\nDetails: {details}"
        if original_error:
            full_message += f"\nCaused by: {original_error}"

        super().__init__(full_message)

    def to_dict(self):
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "original_error": str(self.original_error) if self.original_error else None,
        }


class ProcessingError(AudioNormError):
    def __init__(self, message, error_code=None, details=None, original_error=None):
        super().__init__(message, error_code or "PROC_ERR", details, original_error)


class ConfigError(ProcessingError):
    def __init__(self, message, error_code=None, details=None, original_error=None):
        super().__init__(message, error_code or "CFG_ERR", details, original_error)


class AudioFileError(ProcessingError):
    """An audio file could not be opened, decoded, created or written."""

    def __init__(self, message, error_code=None, details=None, original_error=None):
        super().__init__(message, error_code or "IO_ERR", details, original_error)


class MeasurementError(ProcessingError):
    """The loudness meter could not be created, fed or queried."""

    def __init__(self, message, error_code=None, details=None, original_error=None):
        super().__init__(message, error_code or "MEAS_ERR", details, original_error)
