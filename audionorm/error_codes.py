"""Error codes for audionorm measurement and normalization."""

from enum import Enum


class ErrorCategory(Enum):
    SYSTEM = "System"
    FILE = "File Operation"
    MEASUREMENT = "Loudness Measurement"
    CONFIG = "Configuration"


class ErrorCode(Enum):
    # File Errors (2000-2006)
    FILE_NOT_FOUND = 2000
    INVALID_FILE_FORMAT = 2003
    FILE_WRITE_ERROR = 2005
    FILE_READ_ERROR = 2006

    # Measurement Errors (3000-3003)
    MEASUREMENT_INIT_ERROR = 3000
    MEASUREMENT_FEED_ERROR = 3001
    MEASUREMENT_QUERY_ERROR = 3002
    MEASUREMENT_CLOSED = 3003

    # Configuration Errors (6000-6002)
    INVALID_CONFIGURATION = 6002

    @classmethod
    def get_category(cls, code) -> ErrorCategory:
        code_value = code.value if isinstance(code, cls) else code
        ranges = {
            (2000, 2999): ErrorCategory.FILE,
            (3000, 3999): ErrorCategory.MEASUREMENT,
            (6000, 6999): ErrorCategory.CONFIG,
        }
        for (lo, hi), cat in ranges.items():
            if lo <= code_value <= hi:
                return cat
        return ErrorCategory.SYSTEM

    @classmethod
    def get_description(cls, code) -> str:
        descriptions = {
            cls.FILE_NOT_FOUND: "File not found",
            cls.INVALID_FILE_FORMAT: "Invalid or unsupported audio format",
            cls.FILE_WRITE_ERROR: "Failed to write audio file",
            cls.FILE_READ_ERROR: "Failed to read audio file",
            cls.MEASUREMENT_INIT_ERROR: "Loudness meter could not be initialized",
            cls.MEASUREMENT_FEED_ERROR: "Loudness meter rejected audio frames",
            cls.MEASUREMENT_QUERY_ERROR: "Integrated loudness could not be computed",
            cls.MEASUREMENT_CLOSED: "Loudness meter used after release",
            cls.INVALID_CONFIGURATION: "Invalid configuration",
        }
        return descriptions.get(code, "Unknown error")
