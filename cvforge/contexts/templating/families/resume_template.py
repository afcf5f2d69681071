"""
Resume-Template family.

Single-entry layout: each section shows one record, so the tokens are filled
from the first education, experience and project entries.
"""

from pathlib import Path
from typing import Dict, Optional

from cvforge.contexts.templating.families.base import FamilyAdapter, replace_tokens
from cvforge.contexts.templating.families.sixty_seconds import profile_url
from cvforge.contexts.templating.registries import url_filter
from cvforge.contexts.templating.resume_data import (
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    ResumeView,
)


class ResumeTemplateAdapter(FamilyAdapter):
    name = "resume-template"
    engine = "pdflatex"

    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        return replace_tokens(text, self.token_values(resume))

    def token_values(self, resume: ResumeView) -> Dict[str, object]:
        info = resume.personal
        school = resume.education[0] if resume.education else EducationEntry()
        job = resume.experience[0] if resume.experience else ExperienceEntry()
        project = resume.projects[0] if resume.projects else ProjectEntry()

        return {
            "FULL_NAME": info.full_name,
            "TAGLINE": info.tagline,
            "EMAIL": info.email,
            "PHONE": info.phone,
            "ADDRESS": info.location,
            "PORTFOLIO_URL": url_filter(info.website),
            "GITHUB_URL": url_filter(profile_url(info.github, "github.com")),
            "LINKEDIN_URL": url_filter(profile_url(info.linkedin, "linkedin.com/in")),
            "SUMMARY_TEXT": resume.summary,
            "EDUCATION_LEVEL": school.full_degree,
            "INSTITUTION": school.institution,
            "START_YEAR": school.start_date,
            "END_YEAR": school.end_date,
            "MARKS_CGPA": school.gpa,
            "SKILLS_CATEGORY": "Technical Skills" if resume.technical_skills else "",
            "SKILLS_LIST": ", ".join(resume.all_skills),
            "EMPLOYER_NAME": job.company,
            "DESIGNATION": job.title,
            "EMPLOYMENT_DATES": job.date_range,
            "RESPONSIBILITIES": "; ".join(job.responsibilities),
            "PROJECT_NAME": project.name,
            "PROJECT_DESCRIPTION": project.description,
            "PROJECT_DEMO_URL": url_filter(project.url),
            "PROJECT_GITHUB_URL": url_filter(project.repository),
        }
