"""Parser diagnostic models."""

from pydantic import BaseModel


class ParseWarning(BaseModel):
    """Recoverable structural problem found while parsing."""

    line: int
    column: int
    message: str


class Suggestion(BaseModel):
    """Migration hint attached to a hook usage."""

    line: int
    original_text: str
    hint: str
    category: str
