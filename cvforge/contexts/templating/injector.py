"""
Data Injector

Chooses the family adapter for a template and runs it. Family selection is an
explicit, ordered list of (predicate, adapter) rules: the first rule whose
predicate accepts the template's identity wins, so specific families must be
listed before looser substring matches. Anything unmatched goes to the
generic adapter.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from cvforge.contexts.templating.families import (
    AltaCVAdapter,
    CurveAdapter,
    CVTemplateAdapter,
    FamilyAdapter,
    GenericAdapter,
    HipsterAdapter,
    MAltaCVAdapter,
    ResumeTemplateAdapter,
    SixtySecondsAdapter,
)
from cvforge.contexts.templating.logger import _log_debug, _log_warning, log_injection_summary
from cvforge.contexts.templating.placeholders import find_unresolved_tokens
from cvforge.contexts.templating.registries import FragmentRegistry
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.contexts.templating.template_config import TemplateConfig


@dataclass(frozen=True)
class TemplateIdentity:
    """What dispatch predicates look at: the template id and display name."""

    template_id: str
    name: str = ""

    @classmethod
    def from_config(cls, config: TemplateConfig) -> "TemplateIdentity":
        return cls(template_id=config.template_id, name=config.name)

    @property
    def id_lower(self) -> str:
        return self.template_id.lower()

    @property
    def name_lower(self) -> str:
        return self.name.lower()

    def contains(self, needle: str) -> bool:
        """Substring match against id or name."""
        return needle in self.id_lower or needle in self.name_lower

    def words(self) -> set:
        """Whole words of id and name, split on spaces, hyphens and underscores."""
        return set(re.split(r"[\s_\-]+", f"{self.id_lower} {self.name_lower}")) - {""}


Predicate = Callable[[TemplateIdentity], bool]


def is_sixty_seconds(identity: TemplateIdentity) -> bool:
    return identity.contains("sixty")


def is_resume_template(identity: TemplateIdentity) -> bool:
    return identity.contains("resume-template") or "resume template" in identity.name_lower


def is_cv_template(identity: TemplateIdentity) -> bool:
    if identity.contains("cv-template"):
        return True
    words = identity.words()
    return "cv" in words and "template" in words and not identity.contains("resume")


def is_maltacv(identity: TemplateIdentity) -> bool:
    return identity.contains("maltacv")


def is_curve(identity: TemplateIdentity) -> bool:
    return identity.contains("curve")


def is_altacv(identity: TemplateIdentity) -> bool:
    return identity.contains("alta") and not identity.contains("maltacv")


def is_hipster(identity: TemplateIdentity) -> bool:
    return identity.contains("hipster") or "simple" in identity.name_lower


@dataclass(frozen=True)
class DispatchRule:
    label: str
    predicate: Predicate
    adapter: FamilyAdapter


@dataclass
class InjectionResult:
    """Populated source plus what happened while producing it."""

    text: str
    adapter: FamilyAdapter
    used_fallback: bool = False
    unresolved: List[str] = field(default_factory=list)


def default_rules(fragments: FragmentRegistry = None) -> Tuple[DispatchRule, ...]:
    """
    Family rules, most specific first.

    Named families come before the "resume template" and "cv template"
    wordings, so "AltaCV Resume Template" stays an AltaCV. 'maltacv' also
    contains 'alta', so it precedes altacv.
    """
    return (
        DispatchRule("maltacv", is_maltacv, MAltaCVAdapter(fragments)),
        DispatchRule("curve", is_curve, CurveAdapter(fragments)),
        DispatchRule("altacv", is_altacv, AltaCVAdapter(fragments)),
        DispatchRule("hipster", is_hipster, HipsterAdapter(fragments)),
        DispatchRule("sixty-seconds", is_sixty_seconds, SixtySecondsAdapter(fragments)),
        DispatchRule("resume-template", is_resume_template, ResumeTemplateAdapter(fragments)),
        DispatchRule("cv-template", is_cv_template, CVTemplateAdapter(fragments)),
    )


class DataInjector:
    """
    Populates template sources with resume data.

    Args:
        rules: Ordered dispatch rules (defaults to default_rules())
        fallback: Adapter used when no rule matches
    """

    def __init__(
        self,
        rules: Optional[Sequence[DispatchRule]] = None,
        fallback: Optional[FamilyAdapter] = None,
        fragments: FragmentRegistry = None,
    ):
        self.rules: Tuple[DispatchRule, ...] = tuple(
            rules if rules is not None else default_rules(fragments)
        )
        self.fallback = fallback or GenericAdapter(fragments)

    def select_adapter(self, identity: TemplateIdentity) -> FamilyAdapter:
        """First matching rule's adapter, or the fallback."""
        for rule in self.rules:
            if rule.predicate(identity):
                return rule.adapter
        return self.fallback

    def dispatch_table(self) -> List[Tuple[str, str]]:
        """(rule label, adapter name) pairs in evaluation order, for inspection."""
        table = [(rule.label, rule.adapter.name) for rule in self.rules]
        table.append(("fallback", self.fallback.name))
        return table

    def inject_report(
        self,
        identity: TemplateIdentity,
        resume: Union[ResumeView, Mapping[str, Any]],
        raw_text: str,
        workspace_dir: Optional[Path] = None,
    ) -> InjectionResult:
        """
        Populate raw_text and report the adapter used and tokens left behind.

        Adapters that need a workspace fall back to the generic adapter when
        none is given.
        """
        if not isinstance(resume, ResumeView):
            resume = ResumeView(resume)

        adapter = self.select_adapter(identity)
        used_fallback = adapter is self.fallback

        if adapter.requires_workspace and workspace_dir is None:
            _log_warning(
                f"'{adapter.name}' adapter needs a workspace; using '{self.fallback.name}' instead"
            )
            adapter = self.fallback
            used_fallback = True

        if used_fallback:
            _log_warning(
                f"InjectorFallbackUsed: no family adapter for '{identity.template_id}', "
                f"using '{adapter.name}'"
            )
        else:
            _log_debug(f"Selected '{adapter.name}' adapter for {identity.template_id}")

        text = adapter.inject(raw_text, resume, workspace_dir)
        unresolved = find_unresolved_tokens(text)
        log_injection_summary(identity.template_id, adapter.name, unresolved)

        return InjectionResult(
            text=text, adapter=adapter, used_fallback=used_fallback, unresolved=unresolved
        )

    def inject(
        self,
        identity: TemplateIdentity,
        resume: Union[ResumeView, Mapping[str, Any]],
        raw_text: str,
        workspace_dir: Optional[Path] = None,
    ) -> str:
        """Populate raw_text with resume data; returns the populated source."""
        return self.inject_report(identity, resume, raw_text, workspace_dir).text
