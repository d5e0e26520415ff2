#!/usr/bin/env python3
"""
REPORT GENERATOR - Share and export marks for one class
Ties the renderers to the roster, date store and output sinks

GENERATION PROCESS:
1. Take an already loaded, naturally sorted roster
2. Fill the test date from the date store when the caller gave none
3. Master views: narrow to active test columns (aggregates still use every slot)
4. Render text + HTML payloads, or build the workbook
5. Hand the result to a sink, report success as a bool

FEATURES:
✅ Single-test "smart copy" (WhatsApp text + spreadsheet HTML)
✅ Master sheet "smart copy"
✅ Single-test and master sheet .xlsx export

Priority: HIGH - Entry point used by the CLI
Dependencies: text_renderer, markup_renderer, workbook_builder, date_store, sinks
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .active_columns import active_slots
from .data_models import ExportContext, FormatConfig, StudentRecord
from .date_store import TestDateStore
from .markup_renderer import MarkupRenderer
from .sinks import ClipboardSink, write_workbook_file
from .text_renderer import render_entry_text, render_master_text
from .workbook_builder import WorkbookArtifact, build_entry_workbook, build_master_workbook

logger = logging.getLogger(__name__)


@dataclass
class ClipboardPayload:
    """Plain-text and HTML renderings of the same table"""

    text: str
    html: str


class MarksheetReportGenerator:
    """Generate clipboard payloads and workbooks for a class roster"""

    def __init__(
        self,
        config: Optional[FormatConfig] = None,
        date_store: Optional[TestDateStore] = None,
        output_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize report generator

        Args:
            config: Formatting constants shared by every renderer
            date_store: Test dates for titles and master sheet headers
            output_dir: Default directory for workbook exports
        """
        self.config = config or FormatConfig()
        self.date_store = date_store or TestDateStore()
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.markup_renderer = MarkupRenderer(self.config)

        logger.debug(f"Report generator initialized, output: {self.output_dir}")

    def _with_date(self, context: ExportContext) -> ExportContext:
        """Context with the stored test date filled in when none was given"""
        if context.test_date or not (context.subject and context.test_no):
            return context
        stored = self.date_store.get(context.class_name, context.subject, context.test_no)
        if stored:
            return context.model_copy(update={"test_date": stored})
        return context

    def active_tests(self, roster: Sequence[StudentRecord], context: ExportContext) -> List[int]:
        return active_slots(roster, context.subject, self.config.all_slot_numbers())

    def entry_payload(self, roster: Sequence[StudentRecord], context: ExportContext) -> ClipboardPayload:
        """Text + HTML for a single test"""
        if not (context.subject and context.test_no):
            raise ValueError("Single-test reports need a subject and a test number")
        context = self._with_date(context)
        return ClipboardPayload(
            text=render_entry_text(roster, context, self.config),
            html=self.markup_renderer.render_entry(roster, context),
        )

    def master_payload(self, roster: Sequence[StudentRecord], context: ExportContext) -> ClipboardPayload:
        """Text + HTML for the master sheet (active tests only)"""
        if not context.subject:
            raise ValueError("Master sheet reports need a subject")
        tests = self.active_tests(roster, context)
        logger.info(f"📄 Master sheet for Class {context.class_name} {context.subject}: active tests {tests}")
        return ClipboardPayload(
            text=render_master_text(roster, context, self.config, slot_numbers=tests),
            html=self.markup_renderer.render_master(roster, context, slot_numbers=tests),
        )

    def copy_entry(self, roster: Sequence[StudentRecord], context: ExportContext, sink: ClipboardSink) -> bool:
        payload = self.entry_payload(roster, context)
        return sink.write(payload.text, payload.html)

    def copy_master(self, roster: Sequence[StudentRecord], context: ExportContext, sink: ClipboardSink) -> bool:
        payload = self.master_payload(roster, context)
        return sink.write(payload.text, payload.html)

    def entry_workbook(self, roster: Sequence[StudentRecord], context: ExportContext) -> WorkbookArtifact:
        return build_entry_workbook(roster, self._with_date(context), self.config)

    def master_workbook(self, roster: Sequence[StudentRecord], context: ExportContext) -> WorkbookArtifact:
        if not context.subject:
            raise ValueError("Master sheet reports need a subject")
        return build_master_workbook(roster, context, self.date_store.lookup, self.config)

    def export_entry_workbook(
        self,
        roster: Sequence[StudentRecord],
        context: ExportContext,
        output_dir: Optional[Union[str, Path]] = None,
    ) -> bool:
        """Build and save the single-test workbook"""
        artifact = self.entry_workbook(roster, context)
        logger.info(f"📄 Exporting {artifact.filename}")
        return write_workbook_file(artifact, output_dir or self.output_dir)

    def export_master_workbook(
        self,
        roster: Sequence[StudentRecord],
        context: ExportContext,
        output_dir: Optional[Union[str, Path]] = None,
    ) -> bool:
        """Build and save the master sheet workbook"""
        artifact = self.master_workbook(roster, context)
        logger.info(f"📄 Exporting {artifact.filename}")
        return write_workbook_file(artifact, output_dir or self.output_dir)


__all__ = ["ClipboardPayload", "MarksheetReportGenerator"]
