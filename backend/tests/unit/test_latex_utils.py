"""
Unit tests for LaTeX repair helpers.
"""

import pytest

from services.latex_utils import (
    clean_latex_formatting,
    process_latex_code,
    validate_and_fix_latex_brackets,
)


class TestBracketFixing:
    def test_balanced_code_is_untouched(self):
        code = r"\textbf{Senior} (2020) [x]"

        result = validate_and_fix_latex_brackets(code)

        assert result["fixed_code"] == code
        assert result["fixes"] == []
        assert result["is_valid"] is True

    def test_closes_open_brackets(self):
        result = validate_and_fix_latex_brackets(r"\section{Intro")

        assert result["fixed_code"] == r"\section{Intro}"
        assert result["fixes"] == ["Added missing closing }"]

    def test_closes_in_reverse_order(self):
        result = validate_and_fix_latex_brackets("{[(")

        assert result["fixed_code"] == "{[()]}"
        assert len(result["fixes"]) == 3

    def test_drops_unmatched_closer(self):
        result = validate_and_fix_latex_brackets("text}")

        assert result["fixed_code"] == "text"
        assert result["fixes"] == ["Removed unmatched closing }"]

    def test_rewrites_mismatched_closer(self):
        result = validate_and_fix_latex_brackets("{text]")

        assert result["fixed_code"] == "{text}"
        assert result["fixes"] == ["Fixed bracket mismatch: ] -> }"]


class TestFormattingCleanup:
    def test_markdown_bold_becomes_emph(self):
        cleaned, fixes = clean_latex_formatting("**Bold** and **more**")

        assert cleaned == r"\emph{Bold} and \emph{more}"
        assert fixes == [r"Converted 2 **text** to \emph{text}"]

    @pytest.mark.parametrize("code", [r"\textbf{Bold}", "5 * 3 = 15", ""])
    def test_nothing_to_clean(self, code):
        assert clean_latex_formatting(code) == (code, [])


def test_process_applies_both_passes():
    result = process_latex_code("**Lead** role {x")

    assert result["processed_code"] == r"\emph{Lead} role {x}"
    assert result["fixes"] == [
        "Added missing closing }",
        r"Converted 1 **text** to \emph{text}",
    ]
    assert result["errors"] == []
    assert result["is_valid"] is True
