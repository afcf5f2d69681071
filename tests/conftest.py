"""Shared fixtures: resume data files, the shipped template store and scratch stores."""

import json
import shutil
from pathlib import Path

import pytest
from omegaconf import OmegaConf

from cvforge.contexts.templating.config_store import PROJECT_ROOT, TemplateConfigStore
from cvforge.contexts.templating.resume_data import ResumeView

FIXTURES_PATH = Path(__file__).resolve().parent / "fixtures"
CONFIGS_PATH = PROJECT_ROOT / "templates" / "configs"
STORE_PATH = PROJECT_ROOT / "templates" / "store"


def load_fixture(name: str) -> dict:
    return OmegaConf.to_container(OmegaConf.load(FIXTURES_PATH / name), resolve=True)


@pytest.fixture
def full_resume() -> dict:
    return load_fixture("resume_full.yaml")


@pytest.fixture
def minimal_resume() -> dict:
    return load_fixture("resume_minimal.yaml")


@pytest.fixture
def full_view(full_resume) -> ResumeView:
    return ResumeView(full_resume)


@pytest.fixture
def customizations_request() -> dict:
    return load_fixture("customizations.yaml")


@pytest.fixture
def config_store() -> TemplateConfigStore:
    """Store over the shipped template configs."""
    return TemplateConfigStore(CONFIGS_PATH)


@pytest.fixture
def hipster_config(config_store):
    return config_store.load_config("simple-hipster-cv")


@pytest.fixture
def hipster_source() -> str:
    return (STORE_PATH / "simple-hipster-cv" / "main.tex").read_text(encoding="utf-8")


@pytest.fixture
def minimal_config_dict() -> dict:
    return {
        "templateId": "demo",
        "version": "1.0.0",
        "metadata": {"name": "Demo", "mainFile": "main.tex"},
    }


@pytest.fixture
def scratch_store(tmp_path):
    """
    Writable copy of the shipped configs and template sources.

    Returns:
        (config_dir, store_dir)
    """
    config_dir = tmp_path / "configs"
    store_dir = tmp_path / "store"
    shutil.copytree(CONFIGS_PATH, config_dir)
    shutil.copytree(STORE_PATH, store_dir)
    return config_dir, store_dir


@pytest.fixture
def write_config():
    """Write a raw config dict as <templateId>.config.json."""

    def _write(config_dir: Path, template_id: str, raw) -> Path:
        config_dir.mkdir(parents=True, exist_ok=True)
        path = config_dir / f"{template_id}.config.json"
        path.write_text(raw if isinstance(raw, str) else json.dumps(raw), encoding="utf-8")
        return path

    return _write
