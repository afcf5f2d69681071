"""Unit tests for customization planning and the Customizer operations."""

import pytest

from cvforge.contexts.templating.customizations import Customizations
from cvforge.contexts.templating.customizer import (
    Customizer,
    ReplacePlaceholders,
    SetColorScheme,
    SetCustomColor,
    SetFont,
    ToggleSection,
    plan_operations,
)
from cvforge.contexts.templating.template_config import TemplateConfig

SIMPLE_DOCUMENT = (
    "\\documentclass{article}\n\\usepackage{xcolor}\n\\begin{document}\nBody\n\\end{document}\n"
)


@pytest.fixture
def hipster(hipster_config, hipster_source):
    return Customizer("simple-hipster-cv", hipster_source, hipster_config)


@pytest.fixture
def basic_config(config_store):
    return config_store.load_config("basic-article-resume")


# Customizations


@pytest.mark.unit
def test_customizations_from_dict_accepts_both_cases():
    camel = Customizations.from_dict({"colorScheme": "blue", "enabledSections": {"skills": False}})
    snake = Customizations.from_dict(
        {"color_scheme": "blue", "enabled_sections": {"skills": False}}
    )

    assert camel.to_dict() == snake.to_dict()
    assert camel.color_scheme == "blue"
    assert dict(camel.enabled_sections) == {"skills": False}


@pytest.mark.unit
def test_empty_customizations():
    assert Customizations.from_dict(None).is_empty()
    assert Customizations.from_dict({}).is_empty()
    assert not Customizations(font="times").is_empty()


@pytest.mark.unit
def test_customizations_to_dict(customizations_request):
    assert Customizations.from_dict(customizations_request).to_dict() == customizations_request


# Planning


@pytest.mark.unit
def test_plan_operations_order(customizations_request, hipster_config):
    operations = plan_operations(Customizations.from_dict(customizations_request), hipster_config)

    assert operations == [
        SetColorScheme("blue"),
        SetFont("times"),
        ToggleSection("skills", False),
        ToggleSection("interests", True),
        ReplacePlaceholders({"MOTTO_TEXT": "Ship it & smile"}),
        SetCustomColor("accent", "#1A2B3C"),
    ]


@pytest.mark.unit
def test_plan_operations_respects_feature_flags(customizations_request, basic_config):
    operations = plan_operations(Customizations.from_dict(customizations_request), basic_config)

    # No color scheme or custom color support; placeholder edits are never gated
    assert operations == [
        SetFont("times"),
        ToggleSection("skills", False),
        ToggleSection("interests", True),
        ReplacePlaceholders({"MOTTO_TEXT": "Ship it & smile"}),
    ]


# Color schemes


@pytest.mark.unit
def test_color_scheme_replaces_scheme_command(hipster):
    assert hipster.apply_color_scheme("blue")

    tex = hipster.get_modified_tex()
    assert r"\setcolorscheme{cvblue}" in tex
    assert r"\setcolorscheme{cvgreen}" not in tex
    # The macro definition itself is not a scheme invocation
    assert r"\newcommand{\setcolorscheme}[1]" in tex


@pytest.mark.unit
def test_unknown_color_scheme_is_noop(hipster, hipster_source):
    assert not hipster.apply_color_scheme("neon")
    assert hipster.get_modified_tex() == hipster_source


@pytest.mark.unit
def test_color_scheme_inserted_when_no_target(minimal_config_dict):
    minimal_config_dict["features"] = {"supportsColorSchemes": True}
    minimal_config_dict["colorSchemes"] = {"ink": "\\colorlet{accent}{black}"}
    config = TemplateConfig.from_dict(minimal_config_dict)
    customizer = Customizer("demo", "\\begin{document}\nBody\n\\end{document}", config)

    assert customizer.apply_color_scheme("ink")
    assert customizer.get_modified_tex().startswith("\\colorlet{accent}{black}\n\\begin{document}")


# Fonts


@pytest.mark.unit
def test_font_adds_package_and_drops_family_default(hipster):
    assert hipster.apply_font("times")

    tex = hipster.get_modified_tex()
    preamble = tex[: tex.index(r"\begin{document}")]
    assert r"\usepackage{mathptmx}" in preamble
    assert r"\renewcommand{\familydefault}" not in tex


@pytest.mark.unit
def test_font_commands_added_once(hipster):
    assert hipster.apply_font("helvetica")

    tex = hipster.get_modified_tex()
    assert tex.count(r"\renewcommand{\familydefault}{\sfdefault}") == 1
    assert tex.count(r"\usepackage{helvet}") == 1


@pytest.mark.unit
def test_font_package_not_duplicated(minimal_config_dict):
    minimal_config_dict["fonts"] = {"plain": {"label": "Plain", "packages": ["xcolor"]}}
    customizer = Customizer("demo", SIMPLE_DOCUMENT, TemplateConfig.from_dict(minimal_config_dict))

    assert customizer.apply_font("plain")
    assert customizer.get_modified_tex().count(r"\usepackage{xcolor}") == 1


@pytest.mark.unit
def test_unknown_font_is_noop(hipster, hipster_source):
    assert not hipster.apply_font("comic")
    assert hipster.get_modified_tex() == hipster_source


# Sections


@pytest.mark.unit
def test_remove_section_by_pattern(hipster):
    assert hipster.toggle_section("skills", False)

    tex = hipster.get_modified_tex()
    assert "%-- skills --" not in tex
    assert r"\PLACEHOLDERPROGRAMMING" not in tex
    assert r"\cvsection{Projects}" in tex


@pytest.mark.unit
def test_section_pattern_dot_stops_at_newline(minimal_config_dict):
    minimal_config_dict["sections"] = {
        "dotted": {"label": "Dotted", "pattern": "BEGIN.*END", "removable": True},
        "spanning": {"label": "Spanning", "pattern": "START[\\s\\S]*STOP", "removable": True},
    }
    config = TemplateConfig.from_dict(minimal_config_dict)
    customizer = Customizer("demo", "BEGIN\nkept\nEND\nSTART\ngone\nSTOP", config)

    assert not customizer.toggle_section("dotted", False)
    assert customizer.toggle_section("spanning", False)
    assert customizer.get_modified_tex() == "BEGIN\nkept\nEND\n"


@pytest.mark.unit
def test_remove_section_up_to_next_section(hipster):
    assert hipster.toggle_section("experience", False)

    tex = hipster.get_modified_tex()
    assert r"\cvsection{Experience}" not in tex
    assert r"\PLACEHOLDEREXPERIENCE" not in tex
    assert r"\cvsection{Education}" in tex


@pytest.mark.unit
def test_remove_section_between_markers(hipster):
    assert hipster.toggle_section("interests", False)

    tex = hipster.get_modified_tex()
    assert "%-- interests --" not in tex
    assert "%-- end interests --" not in tex
    assert r"\PLACEHOLDERINTERESTS" not in tex
    assert "{MOTTO_TEXT}" in tex


@pytest.mark.unit
def test_last_section_stops_at_end_document(basic_config, config_store):
    store_dir = config_store.config_dir.parent / "store"
    text = (store_dir / "basic-article-resume" / "resume.tex").read_text()
    customizer = Customizer("basic-article-resume", text, basic_config)

    assert customizer.toggle_section("skills", False)

    tex = customizer.get_modified_tex()
    assert "SKILLS_LIST" not in tex
    assert tex.rstrip().endswith(r"\end{document}")


@pytest.mark.unit
@pytest.mark.parametrize(
    "section_id, enabled",
    [("publications", False), ("interests", True), ("nonexistent", False)],
)
def test_section_noops(hipster, hipster_source, section_id, enabled):
    assert not hipster.toggle_section(section_id, enabled)
    assert hipster.get_modified_tex() == hipster_source


# Placeholders


@pytest.mark.unit
def test_replace_placeholder_escapes_value(hipster):
    assert hipster.replace_placeholder("MOTTO_TEXT", "Ship it & smile")
    assert r"{\small\itshape {Ship it \& smile}}" in hipster.get_modified_tex()


@pytest.mark.unit
def test_replace_placeholder_command_shape(hipster):
    assert hipster.replace_placeholder("PLACEHOLDERTITLE", "Data Engineer")
    assert r"{\Large Data Engineer}" in hipster.get_modified_tex()


@pytest.mark.unit
def test_replace_placeholder_every_occurrence(minimal_config_dict):
    config = TemplateConfig.from_dict(minimal_config_dict)
    customizer = Customizer("demo", "X_TOKEN and X_TOKEN", config)

    assert customizer.replace_placeholder("X_TOKEN", "y")
    assert customizer.get_modified_tex() == "y and y"


@pytest.mark.unit
def test_replace_missing_placeholder(hipster):
    assert not hipster.replace_placeholder("NOT_THERE", "x")
    assert hipster.replace_all_placeholders({"MOTTO_TEXT": "a", "NOT_THERE": "b"}) == 1


@pytest.mark.unit
def test_placeholder_defaults_fill_what_is_left(minimal_config_dict):
    minimal_config_dict["placeholders"] = {
        "GREETING": {"label": "Greeting", "default": "Hi & bye"},
        "NO_DEFAULT": {"label": "No default"},
    }
    config = TemplateConfig.from_dict(minimal_config_dict)
    customizer = Customizer("demo", "{GREETING} {NO_DEFAULT}", config)

    assert customizer.apply_placeholder_defaults() == 1
    assert customizer.get_modified_tex() == r"{Hi \& bye} {NO_DEFAULT}"


@pytest.mark.unit
def test_placeholder_defaults_do_not_override_edits(hipster):
    hipster.replace_placeholder("MOTTO_TEXT", "Edited")

    assert hipster.apply_placeholder_defaults() == 0
    assert "Stay curious" not in hipster.get_modified_tex()


# Custom colors


@pytest.mark.unit
def test_custom_color_defined_before_document(hipster):
    assert hipster.apply_custom_color("accent", "#1A2B3C")

    tex = hipster.get_modified_tex()
    preamble = tex[: tex.index(r"\begin{document}")]
    assert preamble.endswith(
        "\\definecolor{customaccent}{RGB}{26,43,60}\n\\colorlet{accent}{customaccent}\n"
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, value", [("primary", "not-a-color"), ("primary", "#FFF"), ("1bad", "#000000")]
)
def test_invalid_custom_color_is_noop(hipster, hipster_source, name, value):
    assert not hipster.apply_custom_color(name, value)
    assert hipster.get_modified_tex() == hipster_source


@pytest.mark.unit
def test_custom_color_unsupported(basic_config):
    customizer = Customizer("basic-article-resume", SIMPLE_DOCUMENT, basic_config)
    assert not customizer.apply_custom_color("accent", "#000000")


# Insert points


@pytest.mark.unit
def test_inject_into_preamble_default(minimal_config_dict):
    customizer = Customizer("demo", SIMPLE_DOCUMENT, TemplateConfig.from_dict(minimal_config_dict))

    assert customizer.inject_into_preamble(r"\usepackage{microtype}")
    assert "\\usepackage{microtype}\n\\begin{document}" in customizer.get_modified_tex()


@pytest.mark.unit
def test_inject_into_preamble_at_insert_point(minimal_config_dict):
    minimal_config_dict["preambleInsertPoint"] = r"\\documentclass\{article\}"
    customizer = Customizer("demo", SIMPLE_DOCUMENT, TemplateConfig.from_dict(minimal_config_dict))

    assert customizer.inject_into_preamble(r"\usepackage{microtype}")
    assert customizer.get_modified_tex().startswith(
        "\\documentclass{article}\n\\usepackage{microtype}\n\\usepackage{xcolor}"
    )


@pytest.mark.unit
def test_inject_into_document(minimal_config_dict):
    customizer = Customizer("demo", SIMPLE_DOCUMENT, TemplateConfig.from_dict(minimal_config_dict))

    assert customizer.inject_into_document("Intro")
    assert "\\begin{document}\nIntro\nBody" in customizer.get_modified_tex()


# Pipeline


@pytest.mark.unit
def test_apply_records_skipped_operations(hipster):
    operations = [
        SetColorScheme("neon"),
        ToggleSection("interests", True),
        ToggleSection("skills", False),
        ReplacePlaceholders({"MOTTO_TEXT": "a", "NOT_THERE": "b"}),
    ]

    hipster.apply(operations)

    assert hipster.skipped == [operations[0], operations[3]]
    assert "%-- skills --" not in hipster.get_modified_tex()


@pytest.mark.unit
def test_apply_unknown_operation():
    customizer = Customizer("demo", "", None)
    with pytest.raises(TypeError):
        customizer.apply([object()])
