# resume/models.py
import hashlib
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from resume.security import sanitize_input

MIN_JOB_DESCRIPTION_LENGTH = 20
MIN_RESUME_LENGTH = 50


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    BOLD = "bold"


class Seniority(str, Enum):
    ENTRY_LEVEL = "entry-level"
    MID_LEVEL = "mid-level"
    SENIOR = "senior"


class ResumeFormat(str, Enum):
    TRADITIONAL = "traditional"
    MODERN = "modern"
    COMPACT = "compact"


class GenerationRequest(BaseModel):
    """
    A tailoring request as submitted by the user

    Free-text fields are sanitised on the way in, so the length limits
    apply to the sanitised text and every consumer (cache key, prompt,
    storage) sees the same normalised input.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    job_description: str = Field(alias="jobDescription")
    resume: str
    tone: Tone
    seniority: Seniority
    format: ResumeFormat
    include_cover_letter: StrictBool = Field(alias="includeCoverLetter")

    @field_validator("job_description")
    @classmethod
    def _check_job_description(cls, value: str) -> str:
        value = sanitize_input(value)
        if len(value) < MIN_JOB_DESCRIPTION_LENGTH:
            raise ValueError("Please provide a detailed job description.")
        return value

    @field_validator("resume")
    @classmethod
    def _check_resume(cls, value: str) -> str:
        value = sanitize_input(value)
        if len(value) < MIN_RESUME_LENGTH:
            raise ValueError("Please paste the full text of your resume.")
        return value

    def content_digest(self) -> str:
        """Stable hash over the text and every personalisation option"""
        material = json.dumps([
            self.job_description,
            self.resume,
            self.tone.value,
            self.seniority.value,
            self.format.value,
            self.include_cover_letter,
        ])
        return hashlib.sha256(material.encode("utf-8")).hexdigest()


@dataclass
class Insights:
    """Keyword and skill feedback returned alongside the rewrite"""
    matched_keywords: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    suggested_improvements: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "matchedKeywords": list(self.matched_keywords),
            "missingSkills": list(self.missing_skills),
            "suggestedImprovements": list(self.suggested_improvements),
        }


@dataclass
class GenerationResult:
    """A validated rewrite from the upstream model"""
    tailored_resume: str
    insights: Insights

    def to_response(self) -> Dict[str, Any]:
        """Shape returned by the generate endpoint"""
        return {"result": self.tailored_resume, "insights": self.insights.to_dict()}


def coerce_string_list(value: Any) -> List[str]:
    """
    Normalise an insight list from the model

    Numbers become strings, other non-string entries are dropped, and
    entries are trimmed with empties removed. Order and duplicates are kept.
    """
    if not isinstance(value, list):
        raise ValueError("expected a list of strings")

    items = []
    for item in value:
        if isinstance(item, bool):
            continue
        if isinstance(item, (int, float)):
            item = str(item)
        if not isinstance(item, str):
            continue
        item = item.strip()
        if item:
            items.append(item)
    return items


class TailoringPayload(BaseModel):
    """Schema the rewrite service must answer with, and nothing more"""
    model_config = ConfigDict(extra="forbid")

    tailoredResume: str
    matchedKeywords: List[str]
    missingSkills: List[str]
    suggestedImprovements: List[str]

    @field_validator("tailoredResume")
    @classmethod
    def _check_resume(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("The tailored resume was missing from the response.")
        return value

    @field_validator("matchedKeywords", "missingSkills", "suggestedImprovements", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> List[str]:
        return coerce_string_list(value)

    def to_result(self) -> GenerationResult:
        return GenerationResult(
            tailored_resume=self.tailoredResume,
            insights=Insights(
                matched_keywords=self.matchedKeywords,
                missing_skills=self.missingSkills,
                suggested_improvements=self.suggestedImprovements,
            ),
        )
