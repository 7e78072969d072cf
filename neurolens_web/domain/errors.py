from __future__ import annotations


class AnalysisError(Exception):
    """Base for failures the UI turns into a readable message."""

    prefix = ""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    @property
    def user_message(self) -> str:
        return f"{self.prefix}{self.detail}" if self.prefix else self.detail


class SizeLimitExceeded(AnalysisError):
    def __init__(self, filename: str, size_bytes: int, limit_bytes: int):
        mib = 1024 * 1024
        if limit_bytes >= mib and limit_bytes % mib == 0:
            limit_text = f"{limit_bytes // mib}MB"
        else:
            limit_text = f"{limit_bytes} bytes"
        super().__init__(f"File size exceeds limit ({limit_text}).")
        self.filename = filename
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes


class NoFilesSelected(AnalysisError):
    def __init__(self):
        super().__init__("Select at least one file to analyze.")


class TransportFailure(AnalysisError):
    prefix = "Analysis request failed: "


class MalformedResponse(AnalysisError):
    prefix = "Analysis response was malformed: "


class InvalidTransition(Exception):
    """Raised when a session operation is not allowed in its current state."""
