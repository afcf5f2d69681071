"""
Generic fallback adapter.

Used when no family predicate matches. Understands the common token
conventions ({{name}} mustache tokens, ALL_CAPS tokens, and single-argument
header commands) and leaves anything else for the sanitizer.
"""

import re
from pathlib import Path
from typing import Dict, Optional

from cvforge.contexts.templating.families.base import (
    FamilyAdapter,
    as_tex,
    empty_note,
    replace_command_arg,
    replace_tokens,
)
from cvforge.contexts.templating.latex_patterns import PlaceholderPatterns
from cvforge.contexts.templating.registries import Tex
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.utils.text_processing import strip_profile_url

HEADER_COMMANDS = ("name", "email", "phone", "location", "homepage")


class GenericAdapter(FamilyAdapter):
    name = "generic"
    engine = "pdflatex"
    fragment_family = "common"

    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        values = self.token_values(resume)
        # Later passes match only {{...}} and \commands, which escaped data cannot form
        text = replace_tokens(text, values)
        text = self.replace_mustache(text, values)

        info = resume.personal
        header = {
            "name": info.full_name,
            "email": info.email,
            "phone": info.phone,
            "location": info.location,
            "homepage": info.website,
        }
        for command in HEADER_COMMANDS:
            if header[command]:
                text = replace_command_arg(text, command, header[command])

        return text

    def token_values(self, resume: ResumeView) -> Dict[str, object]:
        info = resume.personal
        return {
            "FULL_NAME": info.full_name,
            "FIRST_NAME": info.first_name,
            "LAST_NAME": info.last_name,
            "JOB_TITLE": info.title,
            "EMAIL": info.email,
            "PHONE_NUMBER": info.phone,
            "PHONE": info.phone,
            "LOCATION": info.location,
            "ADDRESS": info.location,
            "SUMMARY": resume.summary,
            "SUMMARY_TEXT": resume.summary,
            "LINKEDIN_USERNAME": strip_profile_url(info.linkedin, "linkedin.com/in"),
            "GITHUB_USERNAME": strip_profile_url(info.github, "github.com"),
            "HOMEPAGE_URL": info.website,
            "EXPERIENCE_ITEMS": self._experience(resume),
            "EDUCATION_ITEMS": self._education(resume),
            "SKILLS_LIST": ", ".join(resume.all_skills),
        }

    def _experience(self, resume: ResumeView) -> Tex:
        if not resume.experience:
            return empty_note("experience")
        return self.render_fragment("experience", jobs=resume.experience)

    def _education(self, resume: ResumeView) -> Tex:
        if not resume.education:
            return empty_note("education")
        return self.render_fragment("education", schools=resume.education)

    def replace_mustache(self, text: str, values: Dict[str, object]) -> str:
        """{{fullName}} / {{FULL_NAME}} style tokens; unknown names are left alone."""
        by_key = {re.sub(r"[^a-z]", "", key.lower()): value for key, value in values.items()}
        by_key.update({"name": values["FULL_NAME"], "fullname": values["FULL_NAME"]})

        def substitute(match: re.Match) -> str:
            key = re.sub(r"[^a-z]", "", match.group(1).lower())
            if key not in by_key:
                return match.group(0)
            return as_tex(by_key[key])

        return re.sub(PlaceholderPatterns.MUSTACHE, substitute, text)
