"""Detected UI idiom models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class IdiomKind(str, Enum):
    """UI interaction idioms the detector recognises."""

    TABS = "tabs"
    FILTER = "filter"
    FORM_DEPENDENCIES = "form-dependencies"
    MODAL = "modal"
    DARK_MODE = "dark-mode"
    PAGINATION = "pagination"
    ACCORDION = "accordion"
    TOGGLE = "toggle"
    SORTABLE_TABLE = "sortable-table"
    EFFECT = "effect"


class ConfidenceBand(str, Enum):
    """Human-facing confidence grouping."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @classmethod
    def from_confidence(cls, confidence: float) -> "ConfidenceBand":
        if confidence >= 0.8:
            return cls.HIGH
        if confidence >= 0.6:
            return cls.MEDIUM
        return cls.LOW


class DetectedPattern(BaseModel):
    """A UI idiom found in the source, identified by (kind, line)."""

    kind: IdiomKind = Field(..., description="Idiom kind")
    line: int = Field(..., description="Line where the cue was found (1-indexed)")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Heuristic confidence")
    description: str = Field(..., description="Human readable description")
    original_snippet: str = Field("", description="Source cue the idiom was inferred from")
    suggested_replacement: str = Field("", description="Replacement template text")
    state_variables: List[str] = Field(default_factory=list)
    derived_variables: List[str] = Field(default_factory=list)
    component: Optional[str] = Field(None, description="Enclosing component, when known")

    @property
    def band(self) -> ConfidenceBand:
        return ConfidenceBand.from_confidence(self.confidence)

    @property
    def key(self) -> tuple:
        return (self.kind, self.line)
