# career_models.py
# Plain records exchanged at the pipeline boundary.
# Field names follow the camelCase JSON the product and the generative prompts use;
# models accept either the alias or the snake_case name.

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator

Difficulty = Literal["Beginner", "Intermediate", "Advanced"]


class Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class SkillFrequency(Record):
    name: str
    frequency: int = Field(ge=1)


class GapAnalysis(Record):
    missing_skills: List[str] = Field(default_factory=list, alias="missingSkills")
    recommendations: List[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.missing_skills and not self.recommendations


class PostingGapAnalysis(GapAnalysis):
    skill_frequency: Dict[str, int] = Field(default_factory=dict, alias="skillFrequency")


class Course(Record):
    # LLMs and third-party catalogs often emit numeric ids / prices
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    title: str
    description: str
    platform: str
    difficulty: Difficulty
    duration: str
    skills: List[str]
    url: str
    price: Optional[str] = None
    rating: Optional[float] = None
    # 0..100 when it comes from the generative collaborator; heuristic scores are uncapped
    ai_match_score: Optional[int] = Field(default=None, ge=0, alias="aiMatchScore")


class UserPreferences(Record):
    preferred_industries: List[str] = Field(default_factory=list, alias="preferredIndustries")
    learning_styles: List[str] = Field(default_factory=list, alias="learningStyles")
    time_commitment: Optional[str] = Field(default=None, alias="timeCommitment")


class ResumeAnalysis(Record):
    skills: List[str] = Field(default_factory=list)
    experience: List[str] = Field(default_factory=list)
    education: List[str] = Field(default_factory=list)
    suggested_roles: List[str] = Field(default_factory=list, alias="suggestedRoles")
    # Stored gap analysis, when the product already ran one for this user
    missing_skills: Optional[List[str]] = Field(default=None, alias="missingSkills")
    recommendations: Optional[List[str]] = None


class User(Record):
    current_role: Optional[str] = Field(default=None, alias="currentRole")
    target_role: Optional[str] = Field(default=None, alias="targetRole")
    skills: List[str] = Field(default_factory=list)
    preferences: Optional[UserPreferences] = None
    resume_analysis: Optional[ResumeAnalysis] = Field(default=None, alias="resumeAnalysis")


class UserContext(Record):
    """What CourseRanker needs to know about the learner."""

    target_role: str = Field(default="", alias="targetRole")
    current_role: Optional[str] = Field(default=None, alias="currentRole")
    current_skills: List[str] = Field(default_factory=list, alias="currentSkills")
    missing_skills: List[str] = Field(default_factory=list, alias="missingSkills")
    preferences: Optional[UserPreferences] = None


class CourseRequest(Record):
    """Input for CourseCandidateSource strategies."""

    target_role: str = Field(alias="targetRole")
    current_skills: List[str] = Field(default_factory=list, alias="currentSkills")
    missing_skills: List[str] = Field(default_factory=list, alias="missingSkills")
    preferences: Optional[UserPreferences] = None


class JobPosting(Record):
    title: str = ""
    description: str = ""

    # Job boards send null for missing titles and descriptions
    @field_validator("title", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class CourseReport(Record):
    gap_analysis: SerializeAsAny[GapAnalysis] = Field(default_factory=GapAnalysis, alias="gapAnalysis")
    courses: List[Course] = Field(default_factory=list)
