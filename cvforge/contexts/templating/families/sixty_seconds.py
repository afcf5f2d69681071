"""Sixty Seconds CV family: header set through \\cvname{}, \\cvmail{}, ... plus ALL_CAPS tokens."""

from pathlib import Path
from typing import Dict, Optional

from cvforge.contexts.templating.families.base import (
    FamilyAdapter,
    empty_note,
    replace_command_arg,
    replace_tokens,
)
from cvforge.contexts.templating.registries import Tex, url_filter
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.utils.text_processing import strip_profile_url


def profile_url(value: str, host: str) -> str:
    """Full https URL for a profile given either a URL or a bare handle."""
    if not value:
        return ""
    if value.startswith("http"):
        return value
    return f"https://{host}/{strip_profile_url(value, host)}"


class SixtySecondsAdapter(FamilyAdapter):
    name = "sixty-seconds"
    engine = "xelatex"
    fragment_family = "common"

    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        text = replace_tokens(text, self.token_values(resume))

        info = resume.personal
        header = {
            "cvname": info.full_name,
            "cvjobtitle": info.title,
            "cvmail": info.email,
            "cvphone": info.phone,
            "cvaddress": info.location,
            "cvsite": url_filter(info.website),
        }
        for command, value in header.items():
            text = replace_command_arg(text, command, value)
        return text

    def token_values(self, resume: ResumeView) -> Dict[str, object]:
        info = resume.personal
        github = strip_profile_url(info.github, "github.com")
        linkedin = strip_profile_url(info.linkedin, "linkedin.com/in")
        return {
            "FULL_NAME": info.full_name,
            "JOB_TITLE": info.title,
            "EMAIL": info.email,
            "PHONE_NUMBER": info.phone,
            "ADDRESS": info.location,
            "WEBSITE_URL": url_filter(info.website),
            "GITHUB_URL": url_filter(profile_url(info.github, "github.com")),
            "GITHUB_TEXT": f"github.com/{github}" if github else "",
            "LINKEDIN_URL": url_filter(profile_url(info.linkedin, "linkedin.com/in")),
            "LINKEDIN_TEXT": f"linkedin.com/in/{linkedin}" if linkedin else "",
            "SUMMARY_TEXT": resume.summary,
            "EXPERIENCE_ITEMS": self._block("experience", "jobs", resume.experience),
            "EDUCATION_ITEMS": self._block("education", "schools", resume.education),
            "SKILLS_LIST": ", ".join(resume.all_skills),
        }

    def _block(self, fragment: str, key: str, entries) -> Tex:
        if not entries:
            return empty_note(fragment)
        return self.render_fragment(fragment, **{key: entries})
