######## models.py
########

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from neurolens_web.domain.errors import MalformedResponse

REPORT_FIELDS = (
    "detected_task",
    "friction_point",
    "solution",
    "action_output",
    "reason_map",
)


@dataclass(frozen=True)
class EncodedFile:
    name: str
    size_bytes: int
    content_type: str
    payload: str                        # base64 text
    preview_url: Optional[str] = None   # data: URL, images only

    @property
    def is_image(self) -> bool:
        return self.content_type.lower().startswith("image/")


@dataclass(frozen=True)
class AnalysisReport:
    detected_task: str
    friction_point: str
    solution: str
    action_output: str
    reason_map: str

    @classmethod
    def from_mapping(cls, data: Any) -> "AnalysisReport":
        """
        Validates parsed model output against the five-field contract.
        Every field must be present and be a non-blank string.
        """
        if not isinstance(data, Mapping):
            raise MalformedResponse(f"expected a JSON object, got {type(data).__name__}")

        missing = [f for f in REPORT_FIELDS if f not in data]
        if missing:
            raise MalformedResponse(f"missing field(s): {', '.join(missing)}")

        values: dict[str, str] = {}
        for field_name in REPORT_FIELDS:
            value = data[field_name]
            if not isinstance(value, str):
                raise MalformedResponse(f"field {field_name!r} is not a string")
            if not value.strip():
                raise MalformedResponse(f"field {field_name!r} is empty")
            values[field_name] = value

        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        return {f: getattr(self, f) for f in REPORT_FIELDS}


class SessionStatus(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SessionSnapshot:
    status: SessionStatus
    generation: int
    files: tuple[EncodedFile, ...] = ()
    report: Optional[AnalysisReport] = None      # SUCCESS only
    error_message: Optional[str] = None          # ERROR only

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "generation": self.generation,
            "files": [
                {
                    "name": f.name,
                    "size_bytes": f.size_bytes,
                    "content_type": f.content_type,
                    "has_preview": f.preview_url is not None,
                }
                for f in self.files
            ],
            "report": self.report.to_dict() if self.report else None,
            "error": self.error_message,
        }
