"""
AltaCV family.

Templates mix three dialects: \\PLACEHOLDERxxx block commands, ALL_CAPS
literal tokens, and AltaCV's own header commands (\\name{...}, \\tagline{...}).
All three are populated.
"""

from pathlib import Path
from typing import Dict, Optional

from cvforge.contexts.templating.families.base import (
    FamilyAdapter,
    empty_note,
    replace_command_arg,
    replace_command_token,
    replace_tokens,
)
from cvforge.contexts.templating.registries import Tex
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.utils.text_processing import first_sentence, strip_profile_url

MAX_PROJECTS = 5
MAX_ACHIEVEMENTS = 3
MAX_TAGS = 10
ACHIEVEMENT_ICONS = (r"\faTrophy", r"\faHeartbeat")


class AltaCVAdapter(FamilyAdapter):
    name = "altacv"
    engine = "xelatex"

    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        text = replace_tokens(text, self.token_values(resume, "EDUCATION_ITEMS_2" in text))
        return self.replace_commands(text, resume)

    def replace_commands(self, text: str, resume: ResumeView) -> str:
        """Header commands and \\PLACEHOLDERxxx blocks (never found inside escaped data)."""
        info = resume.personal
        header_commands = (
            ("name", info.full_name),
            ("tagline", info.tagline),
            ("bio", resume.summary),
            ("firstname", info.first_name),
            ("familyname", info.last_name),
        )
        for command, value in header_commands:
            text = replace_command_arg(text, command, value)

        for token, value in self.block_values(resume).items():
            text = replace_command_token(text, token, value)

        return text

    def token_values(
        self, resume: ResumeView, two_column_education: bool = False
    ) -> Dict[str, object]:
        """ALL_CAPS literal tokens and their values."""
        info = resume.personal
        first_half, second_half = self._split_education(resume, two_column_education)
        return {
            "FULL_NAME": info.full_name,
            "FIRST_NAME": info.first_name,
            "LAST_NAME": info.last_name,
            "TAGLINE": info.tagline,
            "EMAIL": info.email,
            "PHONE_NUMBER": info.phone,
            "LOCATION": info.location,
            "HOMEPAGE_URL": info.website,
            "LINKEDIN_USERNAME": strip_profile_url(info.linkedin, "linkedin.com/in"),
            "GITHUB_USERNAME": strip_profile_url(info.github, "github.com"),
            "BIO_TEXT": resume.summary,
            "EXPERIENCE_ITEMS": self._experience(resume),
            "ACTIVITIES_PROJECTS_LIST": self._projects(resume),
            "AWARDS_LIST": self._achievements(resume),
            "SKILLS_LIST": self._tags(resume),
            "EDUCATION_ITEMS_2": second_half,
            "EDUCATION_ITEMS": first_half,
        }

    def block_values(self, resume: ResumeView) -> Dict[str, object]:
        """\\PLACEHOLDERxxx block commands and their values."""
        info = resume.personal
        return {
            "PLACEHOLDERNAME": info.full_name,
            "PLACEHOLDERTAGLINE": info.tagline,
            "PLACEHOLDERPERSONALINFO": self._personal_info(resume),
            "PLACEHOLDEREXPERIENCE": self._experience(resume),
            "PLACEHOLDERPROJECTS": self._projects(resume),
            "PLACEHOLDERPUBLICATIONS": self._publications(resume),
            "PLACEHOLDERPHILOSOPHY": self._philosophy(resume),
            "PLACEHOLDERPROUD": self._achievements(resume),
            "PLACEHOLDERSTRENGTHS": self._tags(resume),
            "PLACEHOLDERLANGUAGES": self._languages(resume),
            "PLACEHOLDEREDUCATION": self._education(resume),
            "PLACEHOLDERREFEREES": "",
        }

    def _personal_info(self, resume: ResumeView) -> Tex:
        info = resume.personal
        if not info.has_contact:
            return empty_note("personal info")
        return self.render_fragment(
            "personal_info",
            info=info,
            linkedin=strip_profile_url(info.linkedin, "linkedin.com/in"),
            github=strip_profile_url(info.github, "github.com"),
        )

    def _experience(self, resume: ResumeView) -> Tex:
        if not resume.experience:
            return empty_note("experience")
        return self.render_fragment("experience", jobs=resume.experience)

    def _projects(self, resume: ResumeView) -> Tex:
        if not resume.projects:
            return empty_note("projects")
        return self.render_fragment("projects", projects=resume.projects[:MAX_PROJECTS])

    def _publications(self, resume: ResumeView) -> Tex:
        if not resume.publications:
            return empty_note("publications")
        return self.render_fragment("publications", publications=resume.publications)

    def _philosophy(self, resume: ResumeView) -> Tex:
        sentence = first_sentence(resume.summary)
        if not sentence:
            return empty_note("philosophy")
        return self.render_fragment("quote", sentence=sentence)

    def _achievements(self, resume: ResumeView) -> Tex:
        achievements = (resume.achievements or resume.certifications)[:MAX_ACHIEVEMENTS]
        if not achievements:
            return empty_note("achievements")
        pairs = [(a, ACHIEVEMENT_ICONS[i % 2]) for i, a in enumerate(achievements)]
        return self.render_fragment("achievements", achievements=pairs)

    def _tags(self, resume: ResumeView) -> Tex:
        skills = list(resume.all_skills)
        if not skills:
            return empty_note("skills")
        tags = skills[:MAX_TAGS]
        # Overflow collapses into one trailing tag
        if len(skills) > MAX_TAGS:
            tags.append(", ".join(skills[MAX_TAGS:]))
        return self.render_fragment("tags", tags=tags)

    def _languages(self, resume: ResumeView) -> Tex:
        if not resume.languages:
            return empty_note("languages")
        return self.render_fragment("languages", languages=resume.languages)

    def _education(self, resume: ResumeView) -> Tex:
        if not resume.education:
            return empty_note("education")
        return self.render_fragment("education", schools=resume.education)

    def _split_education(self, resume: ResumeView, has_second_column: bool):
        """Education for two-column layouts: first half and second half."""
        if not resume.education:
            return empty_note("education"), Tex("")
        if not has_second_column or len(resume.education) == 1:
            return self._education(resume), Tex("")
        middle = (len(resume.education) + 1) // 2
        return (
            self.render_fragment("education", schools=resume.education[:middle]),
            self.render_fragment("education", schools=resume.education[middle:]),
        )
