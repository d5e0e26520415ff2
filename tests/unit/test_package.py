"""
Unit Tests for Package Sources

Every module must parse on the oldest supported interpreter (3.9), which
rejects backslashes inside f-string replacement fields.
"""

import ast
import sys
from pathlib import Path

import pytest

import marksheet_builder

PACKAGE_DIR = Path(marksheet_builder.__file__).parent
MODULES = sorted(PACKAGE_DIR.glob("*.py"))


def fstring_backslashes(source):
    """Replacement-field expressions containing a backslash"""
    tree = ast.parse(source)
    if sys.version_info < (3, 12):
        # Older parsers reject these outright, so parsing was the check
        return []
    offenders = []
    for node in ast.walk(tree):
        if isinstance(node, ast.FormattedValue):
            segment = ast.get_source_segment(source, node.value) or ""
            if "\\" in segment:
                offenders.append(f"line {node.lineno}: {segment}")
    return offenders


class TestSourceCompatibility:
    """Tests for syntax accepted by every supported Python"""

    @pytest.mark.parametrize("path", MODULES, ids=[p.name for p in MODULES])
    def test_no_backslash_in_fstring_expressions(self, path):
        """f-string expressions stay free of backslashes"""
        assert fstring_backslashes(path.read_text(encoding="utf-8")) == []

    def test_detects_backslash(self):
        """The scan flags the construct older interpreters reject"""
        source = "import re\nx = f\"{re.sub(r'\\s+', '_', 'a b')}\"\n"
        if sys.version_info < (3, 12):
            with pytest.raises(SyntaxError):
                fstring_backslashes(source)
        else:
            assert fstring_backslashes(source) == ["line 2: re.sub(r'\\s+', '_', 'a b')"]

    def test_modules_found(self):
        """The scan covers the package modules"""
        assert "data_models.py" in [p.name for p in MODULES]
