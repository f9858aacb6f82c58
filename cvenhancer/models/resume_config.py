"""Presentation settings applied when rendering a resume."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator


class MetricsLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class EducationPlacement(str, Enum):
    MAIN_CONTENT = "main-content"
    SIDEBAR = "sidebar"


class _CamelModel(BaseModel):
    class Config:
        populate_by_name = True
        extra = "ignore"


class ExperienceSettings(_CamelModel):
    max_jobs: int = Field(default=4, ge=1, alias="maxJobs")
    bullet_points_per_job: int = Field(default=4, ge=1, alias="bulletPointsPerJob")
    max_bullet_length: Optional[int] = Field(default=None, ge=1, alias="maxBulletLength")
    metrics_level: MetricsLevel = Field(default=MetricsLevel.MODERATE, alias="metricsLevel")
    require_action_verbs: bool = Field(default=True, alias="requireActionVerbs")
    avoid_duplicate_points: bool = Field(default=True, alias="avoidDuplicatePoints")
    exclude: List[str] = Field(default_factory=list)


class SkillsSettings(_CamelModel):
    categories_limit: int = Field(default=5, ge=1, alias="categoriesLimit")
    skills_per_category: int = Field(default=8, ge=1, alias="skillsPerCategory")


class EducationSettings(_CamelModel):
    max_entries: int = Field(default=2, ge=1, alias="maxEntries")
    placement: EducationPlacement = EducationPlacement.MAIN_CONTENT
    show_dates: bool = Field(default=True, alias="showDates")
    exclude: List[str] = Field(default_factory=list)


class PdfSettings(_CamelModel):
    single_page_export: bool = Field(default=False, alias="singlePageExport")


class ResumeRenderConfig(_CamelModel):
    """
    User-tunable render settings.

    Defaults come from the bundled template; a persisted copy overrides
    them. The enhancement pipeline only reads this, it never changes it.
    """
    experience: ExperienceSettings = Field(default_factory=ExperienceSettings)
    skills: SkillsSettings = Field(default_factory=SkillsSettings)
    education: EducationSettings = Field(default_factory=EducationSettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)

    @model_validator(mode="before")
    @classmethod
    def ensure_compatibility(cls, data: Any) -> Any:
        # Configs saved before placement / pdf settings existed
        if not isinstance(data, dict):
            return data
        data = dict(data)
        education = dict(data.get("education") or {})
        if not education.get("placement"):
            education["placement"] = EducationPlacement.MAIN_CONTENT.value
        data["education"] = education
        if not data.get("pdf"):
            data["pdf"] = {"singlePageExport": False}
        return data

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
