"""
Template Config Store

Loads, validates and caches <templateId>.config.json files. A store is built
once per process and handed to whatever needs configs; the cache lives on the
instance so tests can build isolated stores or clear it explicitly.
"""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from cvforge.contexts.templating.config_validator import ValidationReport, validate_template_config
from cvforge.contexts.templating.exceptions import (
    ConfigInvalidError,
    ConfigMismatchError,
    ConfigNotFoundError,
)
from cvforge.contexts.templating.logger import _log_debug, _log_warning, log_config_loaded
from cvforge.contexts.templating.template_config import Features, TemplateConfig

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[3]
TEMPLATE_CONFIG_PATH = Path(
    os.getenv("CVFORGE_TEMPLATE_CONFIG_PATH", PROJECT_ROOT / "templates" / "configs")
)

CONFIG_SUFFIX = ".config.json"


class TemplateConfigStore:
    """
    Registry for loading and caching template configs.

    Configs are stored as {config_dir}/{templateId}.config.json. Concurrent
    first loads of the same id may both read the file; the last write into the
    cache wins and both results are equal, so no lock is taken.
    """

    def __init__(self, config_dir: Path = None):
        """
        Initialize the config store.

        Args:
            config_dir: Directory holding *.config.json files. Defaults to
                        CVFORGE_TEMPLATE_CONFIG_PATH from environment
        """
        if config_dir is None:
            config_dir = TEMPLATE_CONFIG_PATH

        self.config_dir = Path(config_dir)
        self._cache: Dict[str, TemplateConfig] = {}

    def get_config_path(self, template_id: str) -> Path:
        """Path where the config for template_id is expected."""
        return self.config_dir / f"{template_id}{CONFIG_SUFFIX}"

    def list_template_ids(self) -> List[str]:
        """Ids of every config file on disk, valid or not."""
        if not self.config_dir.exists():
            return []
        return sorted(
            path.name[: -len(CONFIG_SUFFIX)] for path in self.config_dir.glob(f"*{CONFIG_SUFFIX}")
        )

    def load_config(self, template_id: str) -> TemplateConfig:
        """
        Load a template config, using the cache when possible.

        Args:
            template_id: Template identifier (config file name stem)

        Returns:
            Validated TemplateConfig

        Raises:
            ConfigNotFoundError: No config file for template_id
            ConfigInvalidError: Malformed JSON or failed validation
            ConfigMismatchError: File declares a different templateId
        """
        if template_id in self._cache:
            log_config_loaded(template_id, self.get_config_path(template_id), from_cache=True)
            return self._cache[template_id]

        config_path = self.get_config_path(template_id)
        if not config_path.exists():
            raise ConfigNotFoundError(template_id, config_path, self.list_template_ids())

        raw = self._read_json(template_id, config_path)

        report = validate_template_config(raw)
        if not report.valid:
            raise ConfigInvalidError(template_id, report.errors)

        if raw["templateId"] != template_id:
            raise ConfigMismatchError(template_id, raw["templateId"])

        config = TemplateConfig.from_dict(raw)
        self._cache[template_id] = config
        log_config_loaded(template_id, config_path, from_cache=False)
        return config

    def _read_json(self, template_id: str, config_path: Path) -> Dict[str, Any]:
        try:
            return json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigInvalidError(template_id, [f"malformed JSON: {e}"]) from e

    def get_available_templates(self) -> List[Dict[str, Any]]:
        """
        Summaries of every valid template config.

        Invalid configs are logged and skipped rather than failing the listing.

        Returns:
            List of dicts with templateId, name, description, mainFile,
            features, version and engine
        """
        templates = []
        for template_id in self.list_template_ids():
            try:
                templates.append(self.load_config(template_id).summary())
            except (ConfigInvalidError, ConfigMismatchError, OSError) as e:
                _log_warning(f"Skipping invalid template config '{template_id}': {e}")
        return templates

    def get_template_features(self, template_id: str) -> Features:
        """Feature flags for a template."""
        return self.load_config(template_id).features

    def resolve_template_id(self, identifier: str) -> str:
        """
        Map a loose identifier to a known template id.

        Accepts the exact id, a spaced or camelCase spelling of it, or the
        template's display name (case-insensitive).

        Raises:
            ConfigNotFoundError: Nothing matches
        """
        known = self.list_template_ids()
        if identifier in known:
            return identifier

        kebab = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", identifier.strip())
        kebab = re.sub(r"[\s_]+", "-", kebab).lower()
        if kebab in known:
            _log_debug(f"Resolved '{identifier}' to '{kebab}'")
            return kebab

        wanted = identifier.strip().lower()
        for summary in self.get_available_templates():
            if summary["name"].lower() == wanted:
                return summary["templateId"]

        raise ConfigNotFoundError(identifier, self.get_config_path(identifier), known)

    @staticmethod
    def validate_config(raw: Dict[str, Any]) -> ValidationReport:
        """Validate a config dict without touching the cache."""
        return validate_template_config(raw)

    def clear_cache(self) -> None:
        """Clear all cached configs."""
        self._cache.clear()

    def clear_template_cache(self, template_id: str) -> None:
        """Drop one config from the cache so the next load re-reads it."""
        self._cache.pop(template_id, None)

    def is_cached(self, template_id: str) -> bool:
        """Check if a config is currently cached."""
        return template_id in self._cache

    def get_cached_config(self, template_id: str) -> Optional[TemplateConfig]:
        """Cached config for template_id, without loading."""
        return self._cache.get(template_id)
