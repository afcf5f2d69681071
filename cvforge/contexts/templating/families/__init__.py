"""
Template family adapters.

One adapter per placeholder dialect. The injector decides which adapter
handles a template; adapters never choose among themselves.
"""

from cvforge.contexts.templating.families.altacv import AltaCVAdapter
from cvforge.contexts.templating.families.base import FamilyAdapter
from cvforge.contexts.templating.families.curve import CurveAdapter
from cvforge.contexts.templating.families.cv_template import CVTemplateAdapter
from cvforge.contexts.templating.families.generic import GenericAdapter
from cvforge.contexts.templating.families.hipster import HipsterAdapter
from cvforge.contexts.templating.families.maltacv import MAltaCVAdapter
from cvforge.contexts.templating.families.resume_template import ResumeTemplateAdapter
from cvforge.contexts.templating.families.sixty_seconds import SixtySecondsAdapter

__all__ = [
    "FamilyAdapter",
    "AltaCVAdapter",
    "CurveAdapter",
    "CVTemplateAdapter",
    "GenericAdapter",
    "HipsterAdapter",
    "MAltaCVAdapter",
    "ResumeTemplateAdapter",
    "SixtySecondsAdapter",
]
