"""Unit tests for resume data escaping and formatting helpers."""

import pytest

from pause.utils.escaping import (
    deep_escape,
    escape_html,
    escape_latex,
    escape_typst,
    format_date,
    join_array,
    prepare_resume_data,
)


@pytest.mark.unit
class TestEscapeLatex:
    def test_special_characters(self):
        assert escape_latex("50% of R&D costs $5 #1") == r"50\% of R\&D costs \$5 \#1"

    def test_braces_and_underscores(self):
        assert escape_latex("{a_b}") == r"\{a\_b\}"

    def test_backslash_not_double_escaped(self):
        assert escape_latex("a\\b") == r"a\textbackslash{}b"

    def test_tilde_and_caret(self):
        assert escape_latex("~^") == r"\textasciitilde{}\textasciicircum{}"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty(self, value):
        assert escape_latex(value) == ""


@pytest.mark.unit
class TestEscapeHtml:
    def test_entities(self):
        assert escape_html("<a href=\"x\">Tom & Jerry's</a>") == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#039;s&lt;/a&gt;"
        )

    def test_ampersand_escaped_once(self):
        assert escape_html("&lt;") == "&amp;lt;"


@pytest.mark.unit
class TestEscapeTypst:
    def test_markup_characters(self):
        assert escape_typst("*bold* #fn @ref $x$") == r"\*bold\* \#fn \@ref \$x\$"

    def test_plain_text_unchanged(self):
        assert escape_typst("Philip J. Fry") == "Philip J. Fry"


@pytest.mark.unit
class TestPrepareResumeData:
    def test_nested_strings_escaped(self, resume_data):
        resume_data["work"][0]["highlights"].append("Cut costs by 50%")

        escaped = prepare_resume_data(resume_data, "latex")

        assert escaped["work"][0]["highlights"][-1] == r"Cut costs by 50\%"
        assert resume_data["work"][0]["highlights"][-1] == "Cut costs by 50%"

    def test_non_strings_preserved(self):
        data = {"years": 3, "active": True, "gpa": 3.9, "none": None}
        assert deep_escape(data, escape_latex) == data

    @pytest.mark.parametrize("template_type", ["markdown", "docx"])
    def test_unescaped_types(self, resume_data, template_type):
        assert prepare_resume_data(resume_data, template_type) is resume_data


@pytest.mark.unit
class TestFormatting:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2023-06-01", "June 2023"),
            ("2023-06", "June 2023"),
            ("2023", "January 2023"),
            ("present", "present"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_format_date(self, value, expected):
        assert format_date(value) == expected

    def test_join_array(self):
        assert join_array(["Python", "LaTeX"]) == "Python, LaTeX"
        assert join_array(["a", "b"], " | ") == "a | b"
        assert join_array("not a list") == ""
        assert join_array(None) == ""
