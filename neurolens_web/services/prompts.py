from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_INSTRUCTION = "Analyze this content. Detect the friction. Provide the solution."

DEFAULT_SYSTEM_DIRECTIVE = """
You are NeuroLens, a multimodal reasoning engine.

CORE DIRECTIVE:
Detect the implicit friction or goal behind the user's upload and provide the immediate solution.
Do not default to writing code unless the input is clearly technical (UI, code, data).

ANALYSIS LOGIC:

1. Technical input (UI design, app screenshot, code snippet, error log):
   - Context: the user is building, designing or debugging software.
   - Friction: bugs, poor UX, weak visual design, accessibility gaps, runtime errors.
   - Output: production-ready code that fixes the specific issue.
   - Format: wrap code in Markdown code blocks (```lang ... ```).

2. Knowledge or media input (anime, film, person, art, landmark, object):
   - Context: the user wants to know who or what this is, where it is from, or wants details.
   - Friction: information gap, missing context.
   - Output: a structured Markdown dossier identifying the subject, its source and key details.
   - Format: standard Markdown with headers and bullets.

3. Document input (PDF, handwriting, form, table):
   - Context: the user wants digitization, a summary or structured extraction.
   - Friction: unstructured data, hard-to-read text, information overload.
   - Output: a clean Markdown summary, a JSON extraction or the transcribed text.
   - Format: Markdown or a JSON code block.

When several files are supplied, treat them as one body of evidence for a single task.

JSON RESPONSE FORMAT:
{
  "detected_task": "e.g. Identify Character, Fix UI Component, Parse Invoice",
  "friction_point": "The specific pain point.",
  "solution": "The strategy used to resolve the friction.",
  "action_output": "The actual result (code in backticks, or formatted Markdown text).",
  "reason_map": "Brief logic chain."
}
""".strip()


@dataclass(frozen=True)
class OutputField:
    name: str
    description: str


DEFAULT_OUTPUT_CONTRACT = (
    OutputField("detected_task", "What the user was trying to do"),
    OutputField("friction_point", "The part causing frustration"),
    OutputField("solution", "The full generated final solution"),
    OutputField("action_output", "Copyable output for direct use"),
    OutputField("reason_map", "Explain the thinking behind the friction detection"),
)


@dataclass(frozen=True)
class AnalysisPrompts:
    """
    Process-wide prompt configuration handed to the analysis client:
    the user-turn instruction, the system policy and the required output shape.
    """
    instruction: str = DEFAULT_INSTRUCTION
    system_directive: str = DEFAULT_SYSTEM_DIRECTIVE
    output_contract: tuple[OutputField, ...] = field(default=DEFAULT_OUTPUT_CONTRACT)

    @property
    def required_fields(self) -> list[str]:
        return [f.name for f in self.output_contract]

    def response_schema(self) -> dict:
        return {
            "type": "OBJECT",
            "properties": {
                f.name: {"type": "STRING", "description": f.description}
                for f in self.output_contract
            },
            "required": self.required_fields,
        }

    @classmethod
    def with_overrides(
        cls,
        instruction: str = "",
        system_directive_file: Optional[Path] = None,
    ) -> "AnalysisPrompts":
        directive = DEFAULT_SYSTEM_DIRECTIVE
        if system_directive_file is not None:
            directive = system_directive_file.read_text(encoding="utf-8").strip() or DEFAULT_SYSTEM_DIRECTIVE

        return cls(
            instruction=(instruction or "").strip() or DEFAULT_INSTRUCTION,
            system_directive=directive,
        )
