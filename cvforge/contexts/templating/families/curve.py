"""
Curve CV family.

The main source only carries the name and contact tokens; every resume section
lives in its own rubric file that the main source \\input's. The adapter writes
those files into the render workspace, so it cannot run without one.
"""

from pathlib import Path
from typing import Dict, Optional

from cvforge.contexts.templating.families.base import (
    FamilyAdapter,
    comment_out,
    empty_note,
    replace_command_token,
)
from cvforge.contexts.templating.logger import _log_debug
from cvforge.contexts.templating.registries import Tex
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.utils.text_processing import strip_profile_url

RUBRIC_TITLES = {
    "employment": "Employment History",
    "education": "Education",
    "skills": "Skills",
    "publications": "Research Publications",
    "misc": "Miscellaneous Experience",
    "referee": "Referees",
}


class CurveAdapter(FamilyAdapter):
    name = "curve"
    engine = "xelatex"
    requires_workspace = True

    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        if workspace_dir is None:
            raise ValueError("Curve templates need a workspace directory for their rubric files")

        # Bibliography and photo need files the workspace never has
        text = comment_out(text, r"\\addbibresource\{[^}]*\}")
        text = comment_out(text, r"\\photo(?:\[[^\]]*\])?\{[^}]*\}")

        info = resume.personal
        name = f"{info.full_name}, {info.title}" if info.title else info.full_name
        text = replace_command_token(text, "PLACEHOLDERNAME", name)
        text = replace_command_token(text, "PLACEHOLDERCONTACTINFO", self._contact_info(resume))

        for file_name, content in self.build_rubrics(resume).items():
            (workspace_dir / f"{file_name}.tex").write_text(content + "\n", encoding="utf-8")
            _log_debug(f"Wrote rubric file {file_name}.tex")

        return text

    def _contact_info(self, resume: ResumeView) -> Tex:
        info = resume.personal
        if not info.has_contact:
            return empty_note("contact info")
        return self.render_fragment(
            "contact_info",
            info=info,
            linkedin=strip_profile_url(info.linkedin, "linkedin.com/in"),
            github=strip_profile_url(info.github, "github.com"),
        )

    def build_rubrics(self, resume: ResumeView) -> Dict[str, str]:
        """Content of every rubric file the main source pulls in."""
        rubrics: Dict[str, str] = {}

        if resume.experience:
            rubrics["employment"] = self.render_fragment(
                "employment", title=RUBRIC_TITLES["employment"], jobs=resume.experience
            )
        else:
            rubrics["employment"] = empty_note("employment history")

        if resume.education:
            rubrics["education"] = self.render_fragment(
                "education", title=RUBRIC_TITLES["education"], schools=resume.education
            )
        else:
            rubrics["education"] = empty_note("education")

        groups = [
            (label, values)
            for label, values in (
                ("Technical Skills", resume.technical_skills),
                ("Soft Skills", resume.soft_skills),
                ("Languages", tuple(lang.name for lang in resume.languages)),
            )
            if values
        ]
        if groups:
            rubrics["skills"] = self.render_fragment(
                "skills", title=RUBRIC_TITLES["skills"], groups=groups
            )
        else:
            rubrics["skills"] = empty_note("skills")

        if resume.publications:
            rubrics["publications"] = self.render_fragment(
                "publications", title=RUBRIC_TITLES["publications"], publications=resume.publications
            )
        else:
            rubrics["publications"] = empty_note("publications")

        if resume.projects:
            rubrics["misc"] = self.render_fragment(
                "misc", title=RUBRIC_TITLES["misc"], projects=resume.projects
            )
        else:
            rubrics["misc"] = empty_note("miscellaneous experience")

        # Referees are never part of resume data
        rubrics["referee"] = Tex("% Referees available on request")
        return rubrics
