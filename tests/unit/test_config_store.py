"""Unit tests for template config validation, loading and caching."""

import pytest

from cvforge.contexts.templating.config_store import TemplateConfigStore
from cvforge.contexts.templating.config_validator import validate_template_config
from cvforge.contexts.templating.exceptions import (
    ConfigInvalidError,
    ConfigMismatchError,
    ConfigNotFoundError,
    ErrorKind,
)
from cvforge.contexts.templating.template_config import TemplateConfig


# Validation


@pytest.mark.unit
def test_minimal_config_is_valid(minimal_config_dict):
    report = validate_template_config(minimal_config_dict)
    assert report.valid
    assert report.errors == []


@pytest.mark.unit
def test_missing_required_fields_are_all_reported():
    report = validate_template_config({"metadata": {}})

    assert not report.valid
    joined = "\n".join(report.errors)
    assert "templateId" in joined
    assert "version" in joined
    assert "metadata: 'name'" in joined
    assert "metadata: 'mainFile'" in joined


@pytest.mark.unit
def test_non_object_config_is_invalid():
    report = validate_template_config(["not", "an", "object"])
    assert not report.valid


@pytest.mark.unit
def test_feature_flags_must_be_boolean(minimal_config_dict):
    minimal_config_dict["features"] = {"supportsFonts": "yes"}
    report = validate_template_config(minimal_config_dict)
    assert report.errors == ["features.supportsFonts: must be a boolean"]


@pytest.mark.unit
def test_removable_section_needs_locator(minimal_config_dict):
    minimal_config_dict["sections"] = {"skills": {"label": "Skills", "removable": True}}
    report = validate_template_config(minimal_config_dict)
    assert not report.valid
    assert "sections.skills" in report.errors[0]


@pytest.mark.unit
def test_end_marker_requires_start_marker(minimal_config_dict):
    minimal_config_dict["sections"] = {"skills": {"label": "Skills", "endMarker": "%end"}}
    report = validate_template_config(minimal_config_dict)
    assert report.errors == ["sections.skills: 'endMarker' requires a 'startMarker'"]


@pytest.mark.unit
def test_unknown_engine_rejected(minimal_config_dict):
    minimal_config_dict["engine"] = "context"
    assert not validate_template_config(minimal_config_dict).valid


@pytest.mark.unit
def test_color_scheme_string_shorthand(minimal_config_dict):
    minimal_config_dict["colorSchemes"] = {"blue": "\\colorlet{accent}{blue}"}
    assert validate_template_config(minimal_config_dict).valid

    config = TemplateConfig.from_dict(minimal_config_dict)
    assert config.color_schemes["blue"].command == "\\colorlet{accent}{blue}"
    assert config.color_schemes["blue"].label == "blue"


@pytest.mark.unit
def test_placeholder_type_checked(minimal_config_dict):
    minimal_config_dict["placeholders"] = {"MOTTO": {"label": "Motto", "type": "color"}}
    assert not validate_template_config(minimal_config_dict).valid


# Loading


@pytest.mark.unit
def test_load_shipped_config(config_store):
    config = config_store.load_config("simple-hipster-cv")

    assert config.template_id == "simple-hipster-cv"
    assert config.name == "Simple Hipster CV"
    assert config.main_file == "main.tex"
    assert config.engine == "pdflatex"
    assert config.features.supports_section_toggle
    assert "skills" in config.sections
    assert config.sections["skills"].removable


@pytest.mark.unit
def test_load_config_caches(tmp_path, minimal_config_dict, write_config):
    write_config(tmp_path, "demo", minimal_config_dict)
    store = TemplateConfigStore(tmp_path)

    first = store.load_config("demo")
    assert store.is_cached("demo")

    second = store.load_config("demo")
    assert first is second


@pytest.mark.unit
def test_clear_template_cache_rereads_file(tmp_path, minimal_config_dict, write_config):
    write_config(tmp_path, "demo", minimal_config_dict)
    store = TemplateConfigStore(tmp_path)
    store.load_config("demo")

    minimal_config_dict["metadata"]["name"] = "Renamed"
    write_config(tmp_path, "demo", minimal_config_dict)

    # Still cached
    assert store.load_config("demo").name == "Demo"

    store.clear_template_cache("demo")
    assert not store.is_cached("demo")
    assert store.load_config("demo").name == "Renamed"


@pytest.mark.unit
def test_clear_cache(tmp_path, minimal_config_dict, write_config):
    write_config(tmp_path, "demo", minimal_config_dict)
    store = TemplateConfigStore(tmp_path)
    store.load_config("demo")

    store.clear_cache()

    assert store.get_cached_config("demo") is None


@pytest.mark.unit
def test_missing_config_lists_available(tmp_path, minimal_config_dict, write_config):
    write_config(tmp_path, "demo", minimal_config_dict)
    store = TemplateConfigStore(tmp_path)

    with pytest.raises(ConfigNotFoundError) as exc_info:
        store.load_config("nope")

    error = exc_info.value
    assert error.kind == ErrorKind.CONFIG_NOT_FOUND
    assert error.available == ["demo"]
    assert "Available templates: demo" in str(error)


@pytest.mark.unit
def test_malformed_json_is_invalid(tmp_path, write_config):
    write_config(tmp_path, "broken", "{not json")
    store = TemplateConfigStore(tmp_path)

    with pytest.raises(ConfigInvalidError) as exc_info:
        store.load_config("broken")
    assert "malformed JSON" in exc_info.value.errors[0]
    assert not store.is_cached("broken")


@pytest.mark.unit
def test_invalid_config_carries_errors(tmp_path, write_config):
    write_config(tmp_path, "bad", {"templateId": "bad"})
    store = TemplateConfigStore(tmp_path)

    with pytest.raises(ConfigInvalidError) as exc_info:
        store.load_config("bad")
    assert exc_info.value.kind == ErrorKind.CONFIG_INVALID
    assert len(exc_info.value.errors) >= 2


@pytest.mark.unit
def test_template_id_mismatch(tmp_path, minimal_config_dict, write_config):
    write_config(tmp_path, "other", minimal_config_dict)
    store = TemplateConfigStore(tmp_path)

    with pytest.raises(ConfigMismatchError) as exc_info:
        store.load_config("other")
    assert exc_info.value.declared_id == "demo"
    assert not store.is_cached("other")


@pytest.mark.unit
def test_available_templates_skip_invalid(tmp_path, minimal_config_dict, write_config):
    write_config(tmp_path, "demo", minimal_config_dict)
    write_config(tmp_path, "broken", "{not json")
    store = TemplateConfigStore(tmp_path)

    templates = store.get_available_templates()

    assert [t["templateId"] for t in templates] == ["demo"]
    assert templates[0]["features"]["supportsFonts"] is False


@pytest.mark.unit
def test_shipped_templates_all_valid(config_store):
    ids = {t["templateId"] for t in config_store.get_available_templates()}
    assert ids == set(config_store.list_template_ids())
    assert "simple-hipster-cv" in ids


@pytest.mark.unit
def test_get_template_features(config_store):
    features = config_store.get_template_features("basic-article-resume")
    assert features.supports_fonts
    assert not features.supports_color_schemes


@pytest.mark.unit
@pytest.mark.parametrize(
    "identifier", ["simple-hipster-cv", "simple hipster cv", "simpleHipsterCv", "Simple Hipster CV"]
)
def test_resolve_template_id(config_store, identifier):
    assert config_store.resolve_template_id(identifier) == "simple-hipster-cv"


@pytest.mark.unit
def test_resolve_unknown_template_id(config_store):
    with pytest.raises(ConfigNotFoundError):
        config_store.resolve_template_id("does-not-exist")


@pytest.mark.unit
def test_validate_config_does_not_cache(config_store, minimal_config_dict):
    report = config_store.validate_config(minimal_config_dict)

    assert report.valid
    assert not config_store.is_cached(minimal_config_dict["templateId"])
