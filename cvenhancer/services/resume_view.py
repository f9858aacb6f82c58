"""
Render-ready view of a resume under the user's presentation settings.

This is the boundary to the preview / PDF layer: it decides what is shown,
not how it looks.
"""

from typing import List

from pydantic import BaseModel

from cvenhancer.models.resume import CanonicalResumeData, Education, Experience, SkillCategory
from cvenhancer.models.resume_config import EducationPlacement, ResumeRenderConfig


class ResumeView(BaseModel):
    resume: CanonicalResumeData
    education_placement: EducationPlacement = EducationPlacement.MAIN_CONTENT
    single_page_export: bool = False

    def to_json_dict(self) -> dict:
        return {
            "resume": self.resume.to_json_dict(),
            "educationPlacement": self.education_placement.value,
            "singlePageExport": self.single_page_export,
        }


def _matches_any(value: str, patterns: List[str]) -> bool:
    lower_value = value.lower()
    return any(pattern.strip() and pattern.strip().lower() in lower_value for pattern in patterns)


def truncate_bullet(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - 1].rstrip() + "…"


def _select_experience(experience: List[Experience], config: ResumeRenderConfig) -> List[Experience]:
    settings = config.experience
    kept = [job for job in experience if not _matches_any(job.title, settings.exclude)]

    selected = []
    for job in kept[:settings.max_jobs]:
        duties = job.duties[:settings.bullet_points_per_job]
        if settings.max_bullet_length:
            duties = [truncate_bullet(duty, settings.max_bullet_length) for duty in duties]
        selected.append(job.model_copy(update={"duties": duties}))
    return selected


def _select_education(education: List[Education], config: ResumeRenderConfig) -> List[Education]:
    settings = config.education
    kept = [
        entry for entry in education
        if not _matches_any(entry.institution, settings.exclude)
        and not _matches_any(entry.university or "", settings.exclude)
    ]
    selected = kept[:settings.max_entries]
    if not settings.show_dates:
        selected = [entry.model_copy(update={"date_range": ""}) for entry in selected]
    return selected


def _select_skills(skills: List[SkillCategory], config: ResumeRenderConfig) -> List[SkillCategory]:
    settings = config.skills
    return [
        category.model_copy(update={"skills": category.skills[:settings.skills_per_category]})
        for category in skills[:settings.categories_limit]
    ]


def build_resume_view(resume: CanonicalResumeData, config: ResumeRenderConfig) -> ResumeView:
    """
    Apply render settings to a resume. The input resume is left untouched.

    Args:
        resume: Canonical resume data
        config: Render settings

    Returns:
        View with trimmed sections plus layout flags
    """
    trimmed = resume.model_copy(update={
        "experience": _select_experience(resume.experience, config),
        "education": _select_education(resume.education, config),
        "skills": _select_skills(resume.skills, config),
    })
    return ResumeView(
        resume=trimmed,
        education_placement=config.education.placement,
        single_page_export=config.pdf.single_page_export,
    )
