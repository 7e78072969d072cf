from .errors import (
    AnalysisError,
    InvalidTransition,
    MalformedResponse,
    NoFilesSelected,
    SizeLimitExceeded,
    TransportFailure,
)
from .models import REPORT_FIELDS, AnalysisReport, EncodedFile, SessionSnapshot, SessionStatus

__all__ = [
    "AnalysisError",
    "InvalidTransition",
    "MalformedResponse",
    "NoFilesSelected",
    "SizeLimitExceeded",
    "TransportFailure",
    "REPORT_FIELDS",
    "AnalysisReport",
    "EncodedFile",
    "SessionSnapshot",
    "SessionStatus",
]
