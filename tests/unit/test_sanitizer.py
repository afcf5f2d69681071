"""Unit tests for the pre-compilation sanitizer."""

import pytest

from cvforge.contexts.templating.placeholders import find_unresolved_tokens
from cvforge.contexts.templating.sanitizer import (
    PLACEHOLDER_IMAGE_NAME,
    sanitize,
    sanitize_images,
    sanitize_tokens,
)


@pytest.mark.unit
def test_sanitize_tokens_example():
    report = sanitize_tokens(r"\textbf{FULL_NAME} at COMPANY_NAME $$x$$")

    assert report.text == r"\textbf{} at  $x$"
    assert report.removed_tokens == ["FULL_NAME", "COMPANY_NAME"]


@pytest.mark.unit
def test_placeholder_commands_removed():
    report = sanitize_tokens(r"Hello \PLACEHOLDERNAME{} and \PLACEHOLDERTITLE.")

    assert report.text == "Hello  and ."
    assert report.removed_tokens == [r"\PLACEHOLDERNAME{}", r"\PLACEHOLDERTITLE"]


@pytest.mark.unit
def test_color_definitions_untouched():
    text = "\n".join(
        [
            r"\definecolor{accent}{HTML}{A1B2C3}",
            r"\providecolor{body}{RGB}{10,20,30}",
            r"\colorlet{header}{accent}",
            r"{SOME_TOKEN}",
        ]
    )

    report = sanitize_tokens(text)

    assert report.text.split("\n") == [
        r"\definecolor{accent}{HTML}{A1B2C3}",
        r"\providecolor{body}{RGB}{10,20,30}",
        r"\colorlet{header}{accent}",
        r"{}",
    ]
    assert report.removed_tokens == ["SOME_TOKEN"]


@pytest.mark.unit
def test_ordinary_text_survives():
    text = r"\section{Experience} Jane built 3 tools in Q4, \textbf{C} and R."
    assert sanitize_tokens(text).text == text


@pytest.mark.unit
def test_repeated_tokens_reported_once():
    report = sanitize_tokens("NAME NAME {NAME}")
    assert report.removed_tokens == ["NAME"]


@pytest.mark.unit
def test_image_tokens_point_at_placeholder(tmp_path):
    text = r"\includegraphics[width=2cm]{PROFILE_IMAGE}" + "\n" + r"\includegraphics{AVATAR_PATH}"

    report = sanitize_images(text, tmp_path)

    assert report.text == (
        rf"\includegraphics[width=2cm]{{{PLACEHOLDER_IMAGE_NAME}}}"
        + "\n"
        + rf"\includegraphics{{{PLACEHOLDER_IMAGE_NAME}}}"
    )
    assert report.images_replaced == 2
    assert (tmp_path / PLACEHOLDER_IMAGE_NAME).read_bytes().startswith(b"\x89PNG")


@pytest.mark.unit
def test_unknown_image_tokens_commented_out():
    report = sanitize_images(r"  \includegraphics[scale=0.5]{COMPANY_LOGO} % logo")

    assert report.text == r"%   \includegraphics[scale=0.5]{COMPANY_LOGO} % logo"
    assert report.images_commented == 1


@pytest.mark.unit
def test_sanitize_without_workspace_writes_nothing(tmp_path):
    sanitize(r"\includegraphics{PHOTO_PATH}")
    assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
def test_sanitized_hipster_source_has_no_tokens(hipster_source, tmp_path):
    report = sanitize(hipster_source, tmp_path)

    assert find_unresolved_tokens(report.text) == []
    assert "MOTTO_TEXT" in report.removed_tokens
    assert r"\PLACEHOLDERFIRSTNAME{}" in report.removed_tokens
    assert r"\definecolor{cvgreen}{HTML}{3BA55C}" in report.text
