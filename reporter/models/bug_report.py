"""Bug report data model."""
from dataclasses import dataclass, field
from typing import Any

from reporter.exceptions import AnalysisError
from reporter.models.conversation import UserContext

SEVERITIES = ("low", "medium", "high", "critical")
NOT_PROVIDED = "_Not provided_"
NO_STEPS = "_Not identified in the conversation_"


@dataclass(frozen=True)
class BugAnalysis:
    """Structured bug report extracted from a support conversation."""

    title: str
    description: str
    severity: str
    steps_to_reproduce: list[str] = field(default_factory=list)

    def to_github_body(self, context: UserContext, conversation_url: str) -> str:
        """Format the report and user context as a GitHub issue body."""
        steps_formatted = "\n".join(
            f"{i}. {step}" for i, step in enumerate(self.steps_to_reproduce, 1)
        ) if self.steps_to_reproduce else NO_STEPS

        rows = [
            ("Email", context.email),
            ("Device", context.device),
            ("Browser", context.browser),
            ("OS", context.os),
            ("Country", context.country),
        ]
        table = "\n".join(f"| {name} | {value or NOT_PROVIDED} |" for name, value in rows)

        return f"""## Description
{self.description}

## Steps to Reproduce
{steps_formatted}

## Suggested Severity
`{self.severity}`

---

## User Context
| Field | Value |
|-------|-------|
{table}

## Reference
[Crisp conversation]({conversation_url})

---
_Reported via Crisp Bug Reporter_"""

    @classmethod
    def from_llm_output(cls, llm_output: dict[str, Any]) -> "BugAnalysis":
        """
        Create a BugAnalysis from parsed LLM JSON.

        Raises:
            AnalysisError: If any field has the wrong type or value
        """
        title = llm_output.get("title")
        description = llm_output.get("description")
        severity = llm_output.get("severity")
        steps = llm_output.get("stepsToReproduce")

        if not isinstance(title, str) or not title.strip():
            raise AnalysisError("Model response has an invalid title")
        if not isinstance(description, str):
            raise AnalysisError("Model response has an invalid description")
        if severity not in SEVERITIES:
            raise AnalysisError(f"Model response has an invalid severity: {severity!r}")

        # Missing and null steps both mean none could be identified
        if steps is None:
            steps = []
        if not isinstance(steps, list) or not all(isinstance(s, str) for s in steps):
            raise AnalysisError("Model response has invalid stepsToReproduce")

        return cls(
            title=title,
            description=description,
            severity=severity,
            steps_to_reproduce=list(steps),
        )


@dataclass(frozen=True)
class Issue:
    """A filed GitHub issue."""

    number: int
    url: str
    title: str

    def to_response(self) -> dict[str, Any]:
        return {"issueNumber": self.number, "issueUrl": self.url, "title": self.title}
