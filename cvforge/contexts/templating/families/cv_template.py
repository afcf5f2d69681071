"""
CV-Template family.

Content is declared in the preamble through \\newcommand definitions
(\\name, \\email, \\workOneTitle, \\eduTwoSchool, ...) that the body expands.
Up to three work and three education entries are supported.
"""

import re
from pathlib import Path
from typing import Optional

from cvforge.contexts.templating.families.base import FamilyAdapter, as_tex
from cvforge.contexts.templating.registries import url_filter
from cvforge.contexts.templating.resume_data import EducationEntry, ExperienceEntry, ResumeView

ORDINALS = ("One", "Two", "Three")


def replace_definition(text: str, macro: str, value) -> str:
    """Set the body of \\newcommand{\\macro}{...} (or \\renewcommand)."""
    pattern = rf"(\\(?:re)?newcommand\{{\\{re.escape(macro)}\}})\{{[^{{}}]*\}}"
    replacement = as_tex(value)
    return re.sub(pattern, lambda m: f"{m.group(1)}{{{replacement}}}", text)


class CVTemplateAdapter(FamilyAdapter):
    name = "cv-template"
    engine = "pdflatex"

    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        info = resume.personal
        for macro, value in (
            ("name", info.full_name),
            ("email", info.email),
            ("phone", info.phone),
            ("website", url_filter(info.website)),
        ):
            text = replace_definition(text, macro, value)

        for i, ordinal in enumerate(ORDINALS):
            job = resume.experience[i] if i < len(resume.experience) else ExperienceEntry()
            text = replace_definition(text, f"work{ordinal}Title", job.company)
            text = replace_definition(text, f"work{ordinal}Dates", job.date_range)
            text = replace_definition(text, f"work{ordinal}Position", job.title)
            text = replace_definition(
                text, f"work{ordinal}Description", "; ".join(job.responsibilities)
            )

            school = resume.education[i] if i < len(resume.education) else EducationEntry()
            text = replace_definition(text, f"edu{ordinal}Title", school.full_degree)
            text = replace_definition(text, f"edu{ordinal}Dates", school.date_range)
            text = replace_definition(text, f"edu{ordinal}School", school.institution)
            text = replace_definition(text, f"edu{ordinal}Description", school.description)

        return text
