"""Simple Hipster CV family: \\PLACEHOLDERxxx command tokens, one per block."""

from pathlib import Path
from typing import Optional

from cvforge.contexts.templating.families.base import (
    FamilyAdapter,
    empty_note,
    replace_command_token,
)
from cvforge.contexts.templating.registries import Tex
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.utils.text_processing import escape_latex, strip_profile_url

MAX_EXPERIENCE = 5
MAX_SKILL_BARS = 8


class HipsterAdapter(FamilyAdapter):
    name = "hipster"
    engine = "pdflatex"

    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        info = resume.personal

        replacements = {
            "PLACEHOLDERFIRSTNAME": info.first_name,
            "PLACEHOLDERLASTNAME": info.last_name,
            "PLACEHOLDERTITLE": info.title,
            "PLACEHOLDERABOUTME": resume.summary,
            "PLACEHOLDERPERSONALINFO": self._personal_info(resume),
            "PLACEHOLDERSPECIALIZATION": Tex(
                r"~\textbullet~".join(escape_latex(s) for s in resume.technical_skills)
            ),
            "PLACEHOLDERINTERESTS": ", ".join(resume.interests),
            "PLACEHOLDERCONTACTBUBBLES": self._contact_bubbles(resume),
            "PLACEHOLDEREXPERIENCE": self._experience(resume),
            "PLACEHOLDEREDUCATION": self._education(resume),
            "PLACEHOLDERPROGRAMMING": self._programming(resume),
            "PLACEHOLDERCURRICULUM": self._list(
                [p.name + (f": {p.description}" if p.description else "") for p in resume.projects],
                "projects",
            ),
            "PLACEHOLDERCERTIFICATES": self._list(
                [c.title + (f" ({c.date})" if c.date else "") for c in resume.certifications],
                "certificates",
            ),
            "PLACEHOLDERLANGUAGES": self._list(
                [lang.name + (f" ({lang.level})" if lang.level else "") for lang in resume.languages],
                "languages",
            ),
            "PLACEHOLDERPUBS": self._list(
                [p.title + (f", {p.venue}" if p.venue else "") for p in resume.publications],
                "publications",
            ),
            "PLACEHOLDERFOOTER": self._footer(resume),
        }

        for token, value in replacements.items():
            text = replace_command_token(text, token, value)
        return text

    def _personal_info(self, resume: ResumeView) -> Tex:
        if not resume.personal.has_contact:
            return empty_note("personal info")
        return self.render_fragment("personal_info", info=resume.personal)

    def _contact_bubbles(self, resume: ResumeView) -> Tex:
        info = resume.personal
        if not info.has_contact:
            return empty_note("contact info")
        return self.render_fragment(
            "contact_bubbles",
            info=info,
            linkedin=strip_profile_url(info.linkedin, "linkedin.com/in"),
            github=strip_profile_url(info.github, "github.com"),
        )

    def _experience(self, resume: ResumeView) -> Tex:
        if not resume.experience:
            return empty_note("experience")
        return self.render_fragment("experience", jobs=resume.experience[:MAX_EXPERIENCE])

    def _education(self, resume: ResumeView) -> Tex:
        if not resume.education:
            return empty_note("education")
        return self.render_fragment("education", schools=resume.education)

    def _programming(self, resume: ResumeView) -> Tex:
        skills = resume.technical_skills[:MAX_SKILL_BARS]
        if not skills:
            return empty_note("skills")
        # Bars shrink down the list so the first skills read as strongest
        bars = [(skill, f"{max(0.15, 0.45 - 0.04 * i):.2f}") for i, skill in enumerate(skills)]
        return self.render_fragment("programming", bars=bars)

    def _list(self, entries, what: str) -> Tex:
        if not entries:
            return empty_note(what)
        return self.render_fragment("list", entries=entries)

    def _footer(self, resume: ResumeView) -> str:
        info = resume.personal
        return " -- ".join(part for part in (info.full_name, info.email) if part)
