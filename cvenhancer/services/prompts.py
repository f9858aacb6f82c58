"""
Prompt templates for resume enhancement.
"""

from typing import List, Optional

from cvenhancer.models.document import ParsedDocument
from cvenhancer.models.resume_config import MetricsLevel, ResumeRenderConfig


RESUME_ENHANCEMENT_PROMPT = """You are a professional resume enhancement AI. Your task is to improve the given resume following these strict rules:

1. Fix all spelling and grammar errors
2. Use ATS-optimized formatting with clear section headers
3. Include only: name, email, phone, location, LinkedIn profile in contact info
4. Use bullet points for achievements and responsibilities
5. Quantify achievements with numbers and metrics wherever possible
6. Emphasize technical skills and keywords
7. Remove objective statements
8. Ensure required sections: Education, Experience, Skills, Projects
9. DO NOT invent or add any information not present in the original resume
10. Maintain professional tone and perfect grammar

Return the enhanced resume as a single JSON object with these fields:
- personalInfo (name, title, email, phone, location, linkedin, github)
- experience (array of jobs with company, location, description, title, dateRange, duties)
- education (array with institution, degree, field, location, dateRange)
- skills (array of skill categories with categoryTitle and skills array)
- projects (optional array with name, description, technologies, link)
- certifications (optional array of strings)
- militaryService (optional string)

List each job exactly once. Output ONLY the JSON object, no commentary and no markdown.

IMPORTANT: Only use information from the original resume. Do not add skills, experiences, or details that are not explicitly mentioned."""


OLLAMA_JSON_PROMPT = """You are a resume enhancement engine. Rewrite the resume below and answer with JSON ONLY.

Rules:
- Fix spelling and grammar, use ATS-friendly wording, quantify achievements where the resume gives numbers
- NEVER invent employers, dates, degrees, skills or numbers that are not in the original
- Each job appears exactly once in "experience"
- Your whole answer must be one JSON object that matches this skeleton exactly (same keys, same nesting):

{
  "personalInfo": {"name": "", "title": "", "email": "", "phone": "", "location": "", "linkedin": "", "github": ""},
  "experience": [
    {"company": "", "location": "", "description": "", "title": "", "dateRange": "", "duties": [""]}
  ],
  "education": [
    {"institution": "", "degree": "", "field": "", "location": "", "dateRange": ""}
  ],
  "skills": [
    {"categoryTitle": "", "skills": [""]}
  ],
  "projects": [
    {"name": "", "description": "", "technologies": [""], "link": ""}
  ],
  "certifications": [""],
  "militaryService": ""
}

Do not wrap the JSON in code fences. Do not write anything before or after it."""


METRICS_GUIDANCE = {
    MetricsLevel.LOW: "Use numbers only where the original states them explicitly.",
    MetricsLevel.MODERATE: "Quantify achievements where the original gives enough detail.",
    MetricsLevel.HIGH: "Lead bullets with measurable impact whenever the original supports it.",
}


def build_job_title_block(job_title: Optional[str]) -> str:
    """Instruction block biasing the rewrite toward a target profession."""
    if not job_title or not job_title.strip():
        return ""
    title = job_title.strip()
    return (
        f"TARGET ROLE: {title}\n"
        f"Tailor wording, keyword choice and skill ordering to the conventions of a {title} resume. "
        "Still use only facts present in the original."
    )


def build_writing_guidelines(render_config: Optional[ResumeRenderConfig]) -> str:
    """Writing preferences derived from the user's render settings."""
    if render_config is None:
        return ""

    experience = render_config.experience
    lines: List[str] = [
        "WRITING GUIDELINES:",
        f"- Up to {experience.bullet_points_per_job} duties per job",
        f"- {METRICS_GUIDANCE[experience.metrics_level]}",
    ]
    if experience.max_bullet_length:
        lines.append(f"- Keep each duty under {experience.max_bullet_length} characters")
    if experience.require_action_verbs:
        lines.append("- Start every duty with a strong action verb")
    if experience.avoid_duplicate_points:
        lines.append("- Do not repeat the same point across jobs")
    return "\n".join(lines)


def build_user_content(
    parsed: ParsedDocument,
    job_title: Optional[str] = None,
    render_config: Optional[ResumeRenderConfig] = None
) -> str:
    """
    Text part of the user turn.

    In text mode this carries the extracted resume text; in vision mode it
    tells the model the resume arrives as page images.
    """
    blocks = [
        build_job_title_block(job_title),
        build_writing_guidelines(render_config),
    ]
    if parsed.is_vision_mode:
        blocks.append(
            f"The original resume is attached as {len(parsed.images)} page image(s). "
            "Read every page carefully and use only the information shown in them."
        )
    else:
        blocks.append(f"Original resume:\n\n{parsed.text}")
    return "\n\n".join(block for block in blocks if block)
