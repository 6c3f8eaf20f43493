from __future__ import annotations
from typing import Any, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Wire envelope shared by the worker channel and the HTTP transport.
# Field names on the wire are camelCase (cvText/jobText), as editors send them.

ResultType = Literal["analysis_result", "suggestions_result", "complexity_result", "error"]
ComplexityLevel = Literal["compact", "comfortable", "spacious"]


class RelevancePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cv_text: str = Field(alias="cvText")
    job_text: str = Field(alias="jobText")


class TextPayload(BaseModel):
    text: str


class RelevanceResult(BaseModel):
    similarity: int


class KeywordSuggestions(BaseModel):
    match: str
    score: float
    keywords: List[str]


class ComplexityResult(BaseModel):
    score: int
    level: ComplexityLevel


class ScoringRequest(BaseModel):
    # analyze_relevance | suggest_keywords | analyze_complexity; anything else
    # is answered with an `error` response rather than rejected here
    type: str
    id: Union[str, int]
    payload: dict[str, Any] = Field(default_factory=dict)


class ScoringResponse(BaseModel):
    type: ResultType
    id: Union[str, int, None] = None
    # result object, or a readable message for `error`
    payload: Union[dict[str, Any], str]

    @property
    def is_error(self) -> bool:
        return self.type == "error"
