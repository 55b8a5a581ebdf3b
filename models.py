from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChangeLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_number: int
    content: str
    kind: Literal["added", "removed", "context"] = "context"


class Chunk(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_content: str
    source_start: int = 0
    source_length: int = 0
    target_start: int = 0
    target_length: int = 0
    changes: List[ChangeLine] = Field(default_factory=list)


class DiffFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_path: Optional[str] = None
    target_path: Optional[str] = None  # None -> file deleted
    chunks: List[Chunk] = Field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return self.target_path is None


class PRContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    pull_number: int
    title: str = ""
    description: str = ""


class ReviewSuggestion(BaseModel):
    """One line-anchored suggestion as returned by the review service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    line_number: str = Field(alias="lineNumber")
    review_comment: str = Field(alias="reviewComment")

    @field_validator("line_number", mode="before")
    @classmethod
    def _accept_int_line_number(cls, v):
        # services sometimes send the number unquoted
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ReviewStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class ReviewOutcome(BaseModel):
    status: ReviewStatus
    suggestions: List[ReviewSuggestion] = Field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def ok(cls, suggestions: List[ReviewSuggestion]) -> "ReviewOutcome":
        if not suggestions:
            return cls(status=ReviewStatus.EMPTY)
        return cls(status=ReviewStatus.OK, suggestions=list(suggestions))

    @classmethod
    def failed(cls, error: str) -> "ReviewOutcome":
        return cls(status=ReviewStatus.FAILED, error=error)


class ReviewComment(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    line: int
    body: str


class ReviewResponse(BaseModel):
    review_summary: str
    comments: List[ReviewComment]
