#!/usr/bin/env python3
"""
OUTPUT SINKS - Where rendered payloads go
Every sink reports success as a bool and logs failures instead of raising

SINKS:
✅ write_workbook_file: .xlsx bytes to a directory
✅ PyperclipClipboardSink: plain-text payload to the system clipboard
✅ FileClipboardSink: text + HTML payloads side by side (<stem>.txt / <stem>.html)

Priority: MEDIUM - Boundary layer around the pure renderers
Dependencies: pyperclip
"""

import logging
from pathlib import Path
from typing import Union

import pyperclip

from .workbook_builder import WorkbookArtifact

logger = logging.getLogger(__name__)


def write_workbook_file(artifact: WorkbookArtifact, output_dir: Union[str, Path]) -> bool:
    """Write a built workbook into output_dir under its own filename"""
    output_path = Path(output_dir) / artifact.filename
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(artifact.content)
    except OSError as e:
        logger.error(f"❌ Failed to write workbook {output_path}: {e}")
        return False
    logger.info(f"✅ Workbook saved: {output_path}")
    return True


class ClipboardSink:
    """Accepts a plain-text and an HTML payload together"""

    def write(self, text: str, html: str) -> bool:
        raise NotImplementedError


class PyperclipClipboardSink(ClipboardSink):
    """System clipboard via pyperclip (plain text only)"""

    def write(self, text: str, html: str) -> bool:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.error(f"❌ Clipboard write failed: {e}")
            return False
        logger.info("📋 Copied text table to clipboard")
        logger.warning("⚠️ Clipboard holds plain text only; use --payload-dir to keep the HTML table")
        return True


class FileClipboardSink(ClipboardSink):
    """Writes both payloads to files for apps that import them"""

    def __init__(self, output_dir: Union[str, Path], stem: str = "marks"):
        self.output_dir = Path(output_dir)
        self.stem = stem

    @property
    def text_path(self) -> Path:
        return self.output_dir / f"{self.stem}.txt"

    @property
    def html_path(self) -> Path:
        return self.output_dir / f"{self.stem}.html"

    def write(self, text: str, html: str) -> bool:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.text_path.write_text(text, encoding="utf-8")
            self.html_path.write_text(html, encoding="utf-8")
        except OSError as e:
            logger.error(f"❌ Failed to write clipboard payloads to {self.output_dir}: {e}")
            return False
        logger.info(f"✅ Payloads saved: {self.text_path.name}, {self.html_path.name}")
        return True


__all__ = [
    "write_workbook_file",
    "ClipboardSink",
    "PyperclipClipboardSink",
    "FileClipboardSink",
]
