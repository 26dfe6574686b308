"""WhyItWorks value object - educational breakdown of a plan."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

SECTION_NAMES = (
    "bmr",
    "tdee",
    "calorie_target",
    "protein_target",
    "water_target",
    "timeline",
)


@dataclass(frozen=True)
class ExplanationSection:
    """One explained target.

    Attributes:
        title: Section heading shown to the user
        explanation: Plain-language text with the user's numbers filled in
        formula: Formula string, when the target has one
        coefficients: Numeric constants used (multiplier, g/kg, ...)
    """

    title: str
    explanation: str
    formula: Optional[str] = None
    coefficients: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "explanation": self.explanation,
            "formula": self.formula,
            "coefficients": dict(self.coefficients),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ExplanationSection":
        return ExplanationSection(
            title=data["title"],
            explanation=data["explanation"],
            formula=data.get("formula"),
            coefficients=dict(data.get("coefficients") or {}),
        )


@dataclass(frozen=True)
class WhyItWorks:
    """Structured "why it works" content attached to every plan.

    Not used by any calculation, but must survive persistence and
    caching unchanged.
    """

    bmr: ExplanationSection
    tdee: ExplanationSection
    calorie_target: ExplanationSection
    protein_target: ExplanationSection
    water_target: ExplanationSection
    timeline: ExplanationSection

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name).to_dict() for name in SECTION_NAMES}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "WhyItWorks":
        sections = {name: ExplanationSection.from_dict(data[name]) for name in SECTION_NAMES}
        return WhyItWorks(**sections)
