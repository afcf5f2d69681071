"""
Modified AltaCV family.

Same dialect as AltaCV, but these templates also carry generic tokens
(SUMMARY, ADDRESS, {{name}}...) in their sidebars. Both vocabularies are
merged into a single token pass over the template, so tokens are never
looked for inside data AltaCV has already injected.
"""

from pathlib import Path
from typing import Dict, Optional

from cvforge.contexts.templating.families.altacv import AltaCVAdapter
from cvforge.contexts.templating.families.base import replace_tokens
from cvforge.contexts.templating.families.generic import GenericAdapter
from cvforge.contexts.templating.resume_data import ResumeView


class MAltaCVAdapter(AltaCVAdapter):
    name = "maltacv"
    engine = "xelatex"
    fragment_family = "altacv"

    def __init__(self, fragments=None):
        super().__init__(fragments)
        self._residual = GenericAdapter(fragments)

    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        generic_values = self._residual.token_values(resume)
        values: Dict[str, object] = dict(generic_values)
        # AltaCV renders its own blocks for tokens both families know
        values.update(self.token_values(resume, "EDUCATION_ITEMS_2" in text))

        text = replace_tokens(text, values)
        text = self.replace_commands(text, resume)
        return self._residual.replace_mustache(text, generic_values)
