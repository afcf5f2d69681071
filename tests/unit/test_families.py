"""Unit tests for the template family adapters."""

import pytest

from cvforge.contexts.templating.families import (
    AltaCVAdapter,
    CurveAdapter,
    CVTemplateAdapter,
    GenericAdapter,
    HipsterAdapter,
    MAltaCVAdapter,
    ResumeTemplateAdapter,
    SixtySecondsAdapter,
)
from cvforge.contexts.templating.families.base import (
    comment_out,
    replace_command_arg,
    replace_command_token,
    replace_tokens,
)
from cvforge.contexts.templating.registries import Tex
from cvforge.contexts.templating.resume_data import ResumeView


# Token helpers


@pytest.mark.unit
def test_replace_tokens_is_token_bounded():
    text = "EMAIL WORK_EMAIL \\EMAIL EMAILS"
    assert replace_tokens(text, {"EMAIL": "a@b.c"}) == "a@b.c WORK_EMAIL \\EMAIL EMAILS"


@pytest.mark.unit
def test_replace_tokens_escapes_plain_values():
    assert replace_tokens("NAME", {"NAME": "R&D"}) == r"R\&D"
    assert replace_tokens("NAME", {"NAME": Tex(r"\textbf{x}")}) == r"\textbf{x}"


@pytest.mark.unit
def test_replace_tokens_never_rescans_values():
    values = {"SUMMARY": "Call PHONE or EMAIL", "PHONE": "555", "PHONE_NUMBER": "556"}

    result = replace_tokens("SUMMARY | PHONE | PHONE_NUMBER", values)

    assert result == "Call PHONE or EMAIL | 555 | 556"


@pytest.mark.unit
def test_replace_command_token_consumes_empty_group():
    text = r"\PLACEHOLDERFIRSTNAME{} \PLACEHOLDERFIRSTNAMES"
    assert replace_command_token(text, "PLACEHOLDERFIRSTNAME", "Jane") == (
        r"Jane \PLACEHOLDERFIRSTNAMES"
    )


@pytest.mark.unit
def test_replace_command_arg():
    assert replace_command_arg(r"\name{OLD} \named{x}", "name", "A_B") == r"\name{A\_B} \named{x}"


@pytest.mark.unit
def test_comment_out_skips_commented_lines():
    text = "\\photo{me}\n% \\photo{old}\nkeep"
    assert comment_out(text, r"\\photo\{") == "% \\photo{me}\n% \\photo{old}\nkeep"


# Hipster


@pytest.mark.unit
def test_hipster_populates_blocks(full_view):
    text = "\n".join(
        [
            r"\PLACEHOLDERFIRSTNAME{} \PLACEHOLDERLASTNAME",
            r"\PLACEHOLDEREXPERIENCE",
            r"\PLACEHOLDERSPECIALIZATION",
            r"\PLACEHOLDERPROGRAMMING",
            r"\PLACEHOLDERFOOTER",
        ]
    )

    result = HipsterAdapter().inject(text, full_view)

    assert result.startswith("Jane Doe\n")
    assert r"\cvevent{2021 -- Present}{Senior Data Engineer}{Acme \& Co}" in result
    assert r"\item Cut batch latency by 40\%" in result
    assert r"Python~\textbullet~SQL~\textbullet~Spark" in result
    assert r"\barrule{0.45}{0.5em}{cvpurple}" in result
    assert r"\barrule{0.41}{0.5em}{cvpurple}" in result
    assert result.rstrip().endswith("Jane Doe -- jane.doe@example.com")
    assert "PLACEHOLDER" not in result


@pytest.mark.unit
def test_hipster_empty_blocks_become_comments():
    text = r"\PLACEHOLDEREXPERIENCE" + "\n" + r"\PLACEHOLDERLANGUAGES"

    result = HipsterAdapter().inject(text, ResumeView({"personalInfo": {"fullName": "A B"}}))

    assert "% No experience provided\n" in result
    assert "% No languages provided\n" in result


@pytest.mark.unit
def test_hipster_contact_bubbles(full_view):
    result = HipsterAdapter().inject(r"\PLACEHOLDERCONTACTBUBBLES", full_view)

    assert r"\href{mailto:jane.doe@example.com}{jane.doe@example.com}" in result
    assert r"\infobubble{\faGithub}{cvgreen}{white}{janedoe}" in result


# Curve


@pytest.mark.unit
def test_curve_writes_rubric_files(full_view, tmp_path):
    text = "\n".join(
        [
            r"\addbibresource{refs.bib}",
            r"\photo[r]{photo}",
            r"\PLACEHOLDERNAME",
            r"\PLACEHOLDERCONTACTINFO",
            r"\input{employment}",
        ]
    )

    result = CurveAdapter().inject(text, full_view, tmp_path)
    lines = result.split("\n")

    assert lines[0] == r"% \addbibresource{refs.bib}"
    assert lines[1] == r"% \photo[r]{photo}"
    assert lines[2] == "Jane Doe, Data Engineer"
    assert r"\makefield{\faPhone}{+1 555 0100}" in result

    for name in ("employment", "education", "skills", "publications", "misc", "referee"):
        assert (tmp_path / f"{name}.tex").exists()

    employment = (tmp_path / "employment.tex").read_text()
    assert employment.startswith(r"\begin{rubric}{Employment History}")
    assert r"Acme \& Co" in employment
    assert employment.endswith("\n")
    assert (tmp_path / "referee.tex").read_text() == "% Referees available on request\n"


@pytest.mark.unit
def test_curve_empty_rubrics(tmp_path):
    CurveAdapter().inject(r"\PLACEHOLDERNAME", ResumeView({}), tmp_path)
    assert (tmp_path / "skills.tex").read_text() == "% No skills provided\n\n"


@pytest.mark.unit
def test_curve_requires_workspace(full_view):
    with pytest.raises(ValueError):
        CurveAdapter().inject(r"\PLACEHOLDERNAME", full_view)


# AltaCV


@pytest.mark.unit
def test_altacv_header_and_tokens(full_view):
    text = "\n".join(
        [
            r"\name{YOUR NAME}",
            r"\tagline{YOUR TAGLINE}",
            "EXPERIENCE_ITEMS",
            "SKILLS_LIST",
            r"\PLACEHOLDERPROUD",
            r"\PLACEHOLDERLANGUAGES",
        ]
    )

    result = AltaCVAdapter().inject(text, full_view)

    assert r"\name{Jane Doe}" in result
    assert r"\tagline{Pipelines that never sleep}" in result
    assert r"\cvevent{Senior Data Engineer}{Acme \& Co}{2021 -- Present}{Berlin}" in result
    assert r"\cvtag{Python}" in result
    assert r"\cvtag{Mentoring}" in result
    assert r"\cvachievement{\faTrophy}{Speaker}{Talk at a data conference}" in result
    assert r"\cvskill{German}{5}" in result


@pytest.mark.unit
def test_altacv_tag_overflow():
    skills = [f"skill{i}" for i in range(12)]
    result = AltaCVAdapter().inject("SKILLS_LIST", ResumeView({"skills": skills}))

    assert result.count(r"\cvtag{") == 11
    assert r"\cvtag{skill10, skill11}" in result


@pytest.mark.unit
def test_altacv_achievements_fall_back_to_certifications():
    view = ResumeView({"certifications": [{"title": "Cloud Architect", "date": "2023"}]})
    result = AltaCVAdapter().inject(r"\PLACEHOLDERPROUD", view)
    assert r"\cvachievement{\faTrophy}{Cloud Architect}{}" in result


@pytest.mark.unit
def test_altacv_two_column_education(full_view):
    result = AltaCVAdapter().inject("EDUCATION_ITEMS\n---\nEDUCATION_ITEMS_2", full_view)
    first, second = result.split("---")

    assert "MSc in Computer Science" in first
    assert "BSc in Mathematics" in second
    assert "BSc" not in first


@pytest.mark.unit
def test_maltacv_runs_generic_pass(full_view):
    text = r"\name{X}" + "\nSUMMARY\nADDRESS\nEXPERIENCE_ITEMS"

    result = MAltaCVAdapter().inject(text, full_view)

    assert r"\name{Jane Doe}" in result
    assert "Builds reliable data platforms." in result
    assert "Berlin, Germany" in result
    # AltaCV owns EXPERIENCE_ITEMS, so the AltaCV fragment is used
    assert r"\cvevent{Senior Data Engineer}" in result


@pytest.mark.unit
def test_maltacv_leaves_caps_words_in_injected_data():
    view = ResumeView(
        {"personalInfo": {"fullName": "Jane Doe", "phone": "555"}, "summary": "Reach me by PHONE"}
    )

    result = MAltaCVAdapter().inject("SUMMARY / PHONE", view)

    assert result == "Reach me by PHONE / 555"


# Generic and single-purpose families


@pytest.mark.unit
def test_generic_adapter(full_view):
    text = r"{{fullName}} EMAIL {{unknownThing}} \name{Old} PHONE_NUMBER"

    result = GenericAdapter().inject(text, full_view)

    assert result == r"Jane Doe jane.doe@example.com {{unknownThing}} \name{Jane Doe} +1 555 0100"


@pytest.mark.unit
def test_generic_adapter_does_not_rescan_injected_text():
    view = ResumeView(
        {
            "personalInfo": {"fullName": "EMAIL Person", "email": "x@y.z", "phone": "555"},
            "summary": "Answers the PHONE fast",
        }
    )

    result = GenericAdapter().inject(r"{{fullName}} \name{Old} SUMMARY PHONE", view)

    assert result == r"EMAIL Person \name{EMAIL Person} Answers the PHONE fast 555"


@pytest.mark.unit
def test_generic_adapter_keeps_header_when_value_missing():
    result = GenericAdapter().inject(r"\email{keep@me}", ResumeView({}))
    assert result == r"\email{keep@me}"


@pytest.mark.unit
def test_sixty_seconds_adapter(full_view):
    text = r"\cvname{X} \cvsite{Y} GITHUB_URL GITHUB_TEXT"

    result = SixtySecondsAdapter().inject(text, full_view)

    assert result == (
        r"\cvname{Jane Doe} \cvsite{https://janedoe.dev} "
        r"https://github.com/janedoe github.com/janedoe"
    )


@pytest.mark.unit
def test_resume_template_uses_first_entries(full_view):
    result = ResumeTemplateAdapter().inject("INSTITUTION|EMPLOYER_NAME|RESPONSIBILITIES", full_view)
    assert result == r"Technical University|Acme \& Co|Cut batch latency by 40\%; Led a team of 4"


@pytest.mark.unit
def test_cv_template_sets_definitions(full_view):
    text = "\n".join(
        [
            r"\newcommand{\name}{NAME}",
            r"\newcommand{\workOneTitle}{X}",
            r"\newcommand{\workThreeTitle}{X}",
            r"\renewcommand{\eduTwoSchool}{X}",
        ]
    )

    result = CVTemplateAdapter().inject(text, full_view).split("\n")

    assert result == [
        r"\newcommand{\name}{Jane Doe}",
        r"\newcommand{\workOneTitle}{Acme \& Co}",
        r"\newcommand{\workThreeTitle}{}",
        r"\renewcommand{\eduTwoSchool}{State University}",
    ]
