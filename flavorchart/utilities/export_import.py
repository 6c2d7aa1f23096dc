"""
Export of the allergen chart (PDF, CSV) and a small command line front end.
"""
import argparse
import asyncio
import csv
import io
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from flavorchart.domain.Flavor import Category, Flavor
from flavorchart.infra.pdf_utils import generate_pdf_for_chart
from flavorchart.utilities.constants import (
    ALLERGENS, CHART_TITLE, DISCLAIMER, EXPORT_FILE_PREFIX, FILE_DATE_FORMAT,
    NAME_COLUMN, PRINTED_FORMAT, SOURCE_PDF_URL, SOURCE_TITLE,
)

logger = logging.getLogger(__name__)


def printed_label(now: Optional[datetime] = None) -> str:
    """Local, readable timestamp for the "Printed:" line."""
    return (now or datetime.now()).strftime(PRINTED_FORMAT)


def export_filename(extension: str, now: Optional[datetime] = None) -> str:
    return f"{EXPORT_FILE_PREFIX}-{(now or datetime.now()).strftime(FILE_DATE_FORMAT)}.{extension}"


def chart_csv(groups: Iterable[Tuple[Optional[Category], List[Flavor]]],
              printed_at: str, allergens: Sequence[str] = ALLERGENS) -> str:
    """CSV rendition of the chart; each category section is introduced by a one-cell heading row."""
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow([CHART_TITLE])
    writer.writerow([f"Printed: {printed_at}"])
    for category, rows in groups:
        writer.writerow([])
        if category is not None:
            writer.writerow([category.value])
        writer.writerow([NAME_COLUMN, *allergens])
        for r in rows:
            writer.writerow(r.to_row(allergens))
    writer.writerow([])
    writer.writerow([f"Source: {SOURCE_TITLE}"])
    writer.writerow([SOURCE_PDF_URL])
    writer.writerow([DISCLAIMER])
    return out.getvalue()


class ChartExporter:
    """Export the current engine output in various formats."""

    def __init__(self, engine):
        self.engine = engine

    def pdf_bytes(self, share_link: Optional[str] = None, now: Optional[datetime] = None) -> bytes:
        return generate_pdf_for_chart(
            self.engine.grouped_output,
            printed_label(now),
            allergens=self.engine.allergens,
            store_label=self.engine.ui.store_label,
            share_link=share_link,
        )

    def csv_text(self, now: Optional[datetime] = None) -> str:
        return chart_csv(self.engine.grouped_output, printed_label(now), self.engine.allergens)

    def export_pdf(self, output_path: Path = None, share_link: Optional[str] = None) -> Path:
        """Write the chart PDF; returns the path written."""
        output_path = Path(output_path or export_filename("pdf"))
        output_path.write_bytes(self.pdf_bytes(share_link))
        logger.info(f"Exported {len(self.engine.output_rows)} flavors to {output_path}")
        return output_path

    def export_csv(self, output_path: Path = None) -> Path:
        output_path = Path(output_path or export_filename("csv"))
        output_path.write_text(self.csv_text(), encoding="utf-8")
        logger.info(f"Exported {len(self.engine.output_rows)} flavors to CSV: {output_path}")
        return output_path


class TerminalConfirmer:
    """Confirmer that asks on stdin (or answers yes when --yes is given)."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True
        answer = input(f"{message} [y/N] ")
        return answer.strip().lower() in ("y", "yes")


def run_cli(argv: Optional[List[str]] = None) -> int:
    from flavorchart.infra.Reference_Repository import ReferenceLoader
    from flavorchart.logic.selection.engine import SelectionEngine
    from flavorchart.utilities.config import REFERENCE_SOURCE, SHARE_BASE_URL

    parser = argparse.ArgumentParser(description='Export the flavor allergen chart')
    parser.add_argument('action', choices=['export'], help='Action to perform')
    parser.add_argument('--format', choices=['pdf', 'csv'], default='pdf', help='Export format')
    parser.add_argument('--share', help='Share token describing the selection')
    parser.add_argument('--reference', default=REFERENCE_SOURCE, help='Reference CSV path or URL')
    parser.add_argument('--all', action='store_true', help='Select every reference flavor')
    parser.add_argument('--file', help='Output file path')
    parser.add_argument('--yes', action='store_true', help='Skip the completeness question')
    args = parser.parse_args(argv)

    engine = SelectionEngine()
    asyncio.run(ReferenceLoader(args.reference).load(engine))
    if args.share:
        error = engine.apply_share_token(args.share)
        if error:
            print(f"Error: {error}")
            return 2
    if args.all:
        engine.select_all_reference()

    if not engine.confirm_export(TerminalConfirmer(args.yes)):
        print("Export cancelled.")
        return 1

    exporter = ChartExporter(engine)
    if args.format == 'csv':
        result = exporter.export_csv(Path(args.file) if args.file else None)
    else:
        result = exporter.export_pdf(Path(args.file) if args.file else None,
                                     share_link=engine.share_link(SHARE_BASE_URL))
    print(f"✓ Exported to: {result}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(run_cli())
