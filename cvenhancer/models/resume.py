"""Canonical resume schema that every provider reply is normalized into."""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator


# Accepted spellings of an experience entry's date range, in lookup order
EXPERIENCE_DATE_ALIASES = ("dateRange", "date_range", "dates", "date")


class ResumeModel(BaseModel):
    """Base for resume models: camelCase on the wire, tolerant of nulls."""

    class Config:
        populate_by_name = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # Providers often send null for fields they could not fill
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PersonalInfo(ResumeModel):
    """Contact block at the top of the resume."""
    name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: Optional[str] = None
    github: Optional[str] = None


class Experience(ResumeModel):
    """One job entry."""
    company: str = ""
    location: str = ""
    description: Optional[str] = None
    title: str = ""
    date_range: str = Field(
        default="",
        validation_alias=AliasChoices(*EXPERIENCE_DATE_ALIASES),
        serialization_alias="dateRange",
    )
    duties: List[str] = Field(default_factory=list)

    @property
    def dedupe_key(self) -> str:
        return f"{self.company}{self.title}{self.date_range}"


class Education(ResumeModel):
    """One education entry. ``university`` is a legacy alias of ``institution``."""
    institution: str = ""
    university: Optional[str] = None
    degree: str = ""
    field: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("field", "fieldOfStudy", "field_of_study"),
        serialization_alias="field",
    )
    location: str = ""
    date_range: str = Field(
        default="",
        validation_alias=AliasChoices("dateRange", "date_range", "date"),
        serialization_alias="dateRange",
    )

    @model_validator(mode="after")
    def fill_institution(self) -> "Education":
        if not self.institution and self.university:
            self.institution = self.university
        return self


class SkillCategory(ResumeModel):
    """Named group of skills."""
    category_title: str = Field(
        default="",
        validation_alias=AliasChoices("categoryTitle", "category_title", "title", "category"),
        serialization_alias="categoryTitle",
    )
    skills: List[str] = Field(default_factory=list)


class Project(ResumeModel):
    name: str = ""
    description: str = ""
    technologies: List[str] = Field(default_factory=list)
    link: Optional[str] = None


class CanonicalResumeData(ResumeModel):
    """
    Normalized resume produced by every provider.

    Experience entries are unique by (company, title, dateRange); the
    sanitizer collapses duplicates before this model is built.
    """
    personal_info: PersonalInfo = Field(
        default_factory=PersonalInfo,
        validation_alias=AliasChoices("personalInfo", "personal_info"),
        serialization_alias="personalInfo",
    )
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[SkillCategory] = Field(default_factory=list)
    certifications: Optional[List[str]] = None
    projects: Optional[List[Project]] = None
    military_service: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("militaryService", "military_service"),
        serialization_alias="militaryService",
    )
