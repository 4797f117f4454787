"""
Repairs for LLM-produced LaTeX: bracket balancing and Markdown bold cleanup.
"""

import re
from typing import Any, Dict, List, Tuple

_CLOSER_FOR = {"{": "}", "[": "]", "(": ")"}
_OPENER_FOR = {closer: opener for opener, closer in _CLOSER_FOR.items()}
_MARKDOWN_BOLD = re.compile(r"\*\*([^*]+)\*\*")


def validate_and_fix_latex_brackets(latex_code: str) -> Dict[str, Any]:
    """
    Balance ``{}``, ``[]`` and ``()`` with a bracket stack.

    Unmatched closers are dropped, mismatched closers are rewritten to match
    their opener, and openers still open at the end are closed.
    """
    fixes: List[str] = []
    stack: List[str] = []
    out: List[str] = []

    for char in latex_code:
        if char in _CLOSER_FOR:
            stack.append(char)
            out.append(char)
        elif char in _OPENER_FOR:
            if not stack:
                fixes.append(f"Removed unmatched closing {char}")
                continue
            opener = stack.pop()
            if opener != _OPENER_FOR[char]:
                correct = _CLOSER_FOR[opener]
                out.append(correct)
                fixes.append(f"Fixed bracket mismatch: {char} -> {correct}")
            else:
                out.append(char)
        else:
            out.append(char)

    while stack:
        closer = _CLOSER_FOR[stack.pop()]
        out.append(closer)
        fixes.append(f"Added missing closing {closer}")

    return {
        "fixed_code": "".join(out) if fixes else latex_code,
        "fixes": fixes,
        "errors": [],
        "is_valid": True,
    }


def clean_latex_formatting(latex_code: str) -> Tuple[str, List[str]]:
    """Replace Markdown ``**text**`` with ``\\emph{text}``."""
    fixes = []
    cleaned, count = _MARKDOWN_BOLD.subn(r"\\emph{\1}", latex_code)
    if count:
        fixes.append(f"Converted {count} **text** to \\emph{{text}}")
    return cleaned, fixes


def process_latex_code(latex_code: str) -> Dict[str, Any]:
    brackets = validate_and_fix_latex_brackets(latex_code)
    cleaned, format_fixes = clean_latex_formatting(brackets["fixed_code"])
    return {
        "processed_code": cleaned,
        "fixes": brackets["fixes"] + format_fixes,
        "errors": brackets["errors"],
        "is_valid": brackets["is_valid"],
    }
