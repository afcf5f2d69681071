"""
Resume Data View

Read-only, alias-resolving view over the resume data mapping supplied by
callers. Adapters read resume content exclusively through ResumeView so that
field-name variants (fullName/name, position/title, ...) are handled once.
The source mapping is never mutated.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from cvforge.utils.text_processing import split_full_name


def _first(raw: Mapping[str, Any], *keys: str, default: Any = "") -> Any:
    """First non-empty value among alias keys."""
    for key in keys:
        value = raw.get(key)
        if value not in (None, "", [], {}):
            return value
    return default


def _as_lines(value: Any) -> Tuple[str, ...]:
    """Normalize a list or newline-separated string into stripped, non-empty lines."""
    if not value:
        return ()
    if isinstance(value, str):
        lines = value.splitlines()
    else:
        lines = [str(v) for v in value]
    return tuple(line.strip().lstrip("-•* ").strip() for line in lines if line.strip())


def _as_mappings(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, Mapping)]


def _as_strings(value: Any) -> Tuple[str, ...]:
    """Skill-style lists: strings, or mappings with a name."""
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(s.strip() for s in value.split(",") if s.strip())
    items = []
    for v in value:
        if isinstance(v, Mapping):
            name = _first(v, "name", "skill", "language")
            if name:
                items.append(str(name))
        elif v:
            items.append(str(v))
    return tuple(items)


def format_date_range(start: str, end: str, current: bool = False) -> str:
    """'start -- end' with 'Present' for ongoing entries; empty parts collapse."""
    if current and not end:
        end = "Present"
    if start and end:
        return f"{start} -- {end}"
    return start or end


@dataclass(frozen=True)
class PersonalInfo:
    full_name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    website: str = ""
    linkedin: str = ""
    github: str = ""
    tagline: str = ""
    photo: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "PersonalInfo":
        return cls(
            full_name=str(_first(raw, "fullName", "name", "full_name")),
            title=str(_first(raw, "title", "jobTitle", "headline", "position")),
            email=str(_first(raw, "email", "mail")),
            phone=str(_first(raw, "phone", "phoneNumber", "mobile")),
            location=str(_first(raw, "location", "address", "city")),
            website=str(_first(raw, "website", "portfolio", "homepage", "url")),
            linkedin=str(_first(raw, "linkedin", "linkedIn", "linkedinUrl")),
            github=str(_first(raw, "github", "gitHub", "githubUrl")),
            tagline=str(_first(raw, "tagline", "headline", "title")),
            photo=str(_first(raw, "photo", "image", "profileImage")),
        )

    @property
    def first_name(self) -> str:
        return split_full_name(self.full_name)[0]

    @property
    def last_name(self) -> str:
        return split_full_name(self.full_name)[1]

    @property
    def has_contact(self) -> bool:
        return any((self.email, self.phone, self.location, self.website, self.linkedin, self.github))


@dataclass(frozen=True)
class ExperienceEntry:
    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    responsibilities: Tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "ExperienceEntry":
        return cls(
            title=str(_first(raw, "position", "title", "role", "jobTitle")),
            company=str(_first(raw, "company", "employer", "organization")),
            location=str(_first(raw, "location", "city")),
            start_date=str(_first(raw, "startDate", "start", "from")),
            end_date=str(_first(raw, "endDate", "end", "to")),
            current=bool(raw.get("current", False)),
            responsibilities=_as_lines(
                _first(raw, "responsibilities", "achievements", "highlights", "description")
            ),
        )

    @property
    def date_range(self) -> str:
        return format_date_range(self.start_date, self.end_date, self.current)


@dataclass(frozen=True)
class EducationEntry:
    degree: str = ""
    field: str = ""
    institution: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""
    description: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "EducationEntry":
        return cls(
            degree=str(_first(raw, "degree", "qualification", "level")),
            field=str(_first(raw, "field", "fieldOfStudy", "major")),
            institution=str(_first(raw, "institution", "school", "university")),
            location=str(_first(raw, "location", "city")),
            start_date=str(_first(raw, "startDate", "start")),
            end_date=str(_first(raw, "graduationDate", "endDate", "date", "end")),
            gpa=str(_first(raw, "gpa", "grade", "marks")),
            description=str(_first(raw, "description", "details")),
        )

    @property
    def date_range(self) -> str:
        return format_date_range(self.start_date, self.end_date)

    @property
    def full_degree(self) -> str:
        if self.degree and self.field:
            return f"{self.degree} in {self.field}"
        return self.degree or self.field


@dataclass(frozen=True)
class ProjectEntry:
    name: str = ""
    description: str = ""
    url: str = ""
    repository: str = ""
    technologies: Tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "ProjectEntry":
        return cls(
            name=str(_first(raw, "name", "title")),
            description=str(_first(raw, "description", "summary")),
            url=str(_first(raw, "url", "link", "demo", "demoUrl")),
            repository=str(_first(raw, "github", "repository", "repo", "githubUrl")),
            technologies=_as_strings(_first(raw, "technologies", "tech", "stack", default=())),
        )


@dataclass(frozen=True)
class Achievement:
    title: str = ""
    description: str = ""
    date: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "Achievement":
        if isinstance(raw, str):
            return cls(title=raw)
        return cls(
            title=str(_first(raw, "title", "name")),
            description=str(_first(raw, "description", "issuer", "details")),
            date=str(_first(raw, "date", "year")),
        )


@dataclass(frozen=True)
class Publication:
    title: str = ""
    venue: str = ""
    date: str = ""
    url: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "Publication":
        if isinstance(raw, str):
            return cls(title=raw)
        return cls(
            title=str(_first(raw, "title", "name")),
            venue=str(_first(raw, "venue", "journal", "publisher", "conference")),
            date=str(_first(raw, "date", "year")),
            url=str(_first(raw, "url", "link", "doi")),
        )


@dataclass(frozen=True)
class Language:
    name: str
    level: str = ""

    @property
    def score(self) -> int:
        """Proficiency on a 1-5 scale for rating widgets."""
        level = self.level.lower()
        for words, score in (
            (("native", "mother", "bilingual"), 5),
            (("fluent", "c2", "c1", "advanced"), 4),
            (("professional", "b2", "upper"), 3),
            (("intermediate", "b1", "conversational"), 2),
        ):
            if any(w in level for w in words):
                return score
        return 1 if level else 3


class ResumeView:
    """
    Read-only accessor over a resume data mapping.

    Example:
        view = ResumeView({"personalInfo": {"fullName": "Jane Doe"}})
        view.personal.first_name   # "Jane"
        view.experience            # ()
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data: Mapping[str, Any] = data or {}

        self.personal = PersonalInfo.from_raw(self._data.get("personalInfo") or {})
        self.summary: str = str(_first(self._data, "summary", "profile", "about"))
        self.experience: Tuple[ExperienceEntry, ...] = tuple(
            ExperienceEntry.from_raw(e) for e in _as_mappings(self._data.get("experience"))
        )
        self.education: Tuple[EducationEntry, ...] = tuple(
            EducationEntry.from_raw(e) for e in _as_mappings(self._data.get("education"))
        )
        self.projects: Tuple[ProjectEntry, ...] = tuple(
            ProjectEntry.from_raw(p) for p in _as_mappings(self._data.get("projects"))
        )
        self.certifications: Tuple[Achievement, ...] = tuple(
            Achievement.from_raw(c) for c in (self._data.get("certifications") or [])
        )
        self.achievements: Tuple[Achievement, ...] = tuple(
            Achievement.from_raw(a) for a in (self._data.get("achievements") or [])
        )
        self.publications: Tuple[Publication, ...] = tuple(
            Publication.from_raw(p) for p in (self._data.get("publications") or [])
        )

        skills = self._data.get("skills") or {}
        if isinstance(skills, Mapping):
            self.technical_skills = _as_strings(skills.get("technical"))
            self.soft_skills = _as_strings(skills.get("soft"))
            self.interests = _as_strings(skills.get("interests") or self._data.get("interests"))
            raw_languages = skills.get("languages") or self._data.get("languages")
        else:
            # A flat skills list counts as technical skills
            self.technical_skills = _as_strings(skills)
            self.soft_skills = ()
            self.interests = _as_strings(self._data.get("interests"))
            raw_languages = self._data.get("languages")
        self.languages: Tuple[Language, ...] = self._parse_languages(raw_languages)

    @staticmethod
    def _parse_languages(raw: Any) -> Tuple[Language, ...]:
        languages = []
        for item in raw or []:
            if isinstance(item, Mapping):
                name = _first(item, "name", "language")
                if name:
                    languages.append(
                        Language(str(name), str(_first(item, "level", "proficiency")))
                    )
            elif item:
                languages.append(Language(str(item)))
        return tuple(languages)

    @property
    def all_skills(self) -> Sequence[str]:
        return self.technical_skills + self.soft_skills

    def get(self, key: str, default: Any = None) -> Any:
        """Raw top-level access for adapters needing uncommon fields."""
        return self._data.get(key, default)
