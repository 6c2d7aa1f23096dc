import io
from typing import Iterable, List, Optional, Sequence, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, PageBreak
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from flavorchart.domain.Flavor import Category, Flavor
from flavorchart.infra.qr_utils import fits_in_qr, qr_drawing
from flavorchart.utilities.constants import (
    ALLERGENS, CHART_TITLE, DISCLAIMER, NAME_COLUMN, SOURCE_PDF_URL, SOURCE_TITLE
)

MARGIN = 40
NAME_COLUMN_WIDTH = 200


def chart_table(rows: Sequence[Flavor], allergens: Sequence[str]) -> Table:
    """Name + allergen columns, header repeated on every page."""
    data = [[NAME_COLUMN, *allergens]]
    if rows:
        data.extend(r.to_row(allergens) for r in rows)
    else:
        data.append(["No flavors selected."] + [""] * len(allergens))

    table = Table(data, repeatRows=1, colWidths=[NAME_COLUMN_WIDTH] + [None] * len(allergens))
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#212121")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (1, 0), (-1, -1), "CENTER"),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
    # Highlight "Yes" cells
    for row_idx, r in enumerate(rows, start=1):
        for col_idx, a in enumerate(allergens, start=1):
            if r.value_of(a).value == "Yes":
                style.append(("BACKGROUND", (col_idx, row_idx), (col_idx, row_idx), colors.HexColor("#FFE0E0")))
    table.setStyle(TableStyle(style))
    return table


def _draw_footer(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.drawString(MARGIN, 48, f"Source: {SOURCE_TITLE}")
    canvas.drawString(MARGIN, 37, SOURCE_PDF_URL)
    canvas.setFont("Helvetica", 6.5)
    canvas.drawString(MARGIN, 26, DISCLAIMER)
    canvas.restoreState()


def generate_pdf_for_chart(groups: Iterable[Tuple[Optional[Category], List[Flavor]]],
                           printed_at: str,
                           allergens: Sequence[str] = ALLERGENS,
                           store_label: str = "",
                           share_link: Optional[str] = None) -> bytes:
    """Allergen chart PDF: one section per category (own page) or a single table."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=letter, title=CHART_TITLE,
        rightMargin=MARGIN, leftMargin=MARGIN, topMargin=MARGIN, bottomMargin=70
    )

    styles = getSampleStyleSheet()
    elements = [Paragraph(CHART_TITLE, styles["Title"])]
    if store_label:
        elements.append(Paragraph(store_label, styles["Heading3"]))
    elements += [Paragraph(f"Printed: {printed_at}", styles["Normal"]), Spacer(1, 12)]

    groups = list(groups) or [(None, [])]
    for i, (category, rows) in enumerate(groups):
        if i:
            elements.append(PageBreak())
        if category is not None:
            elements.append(Paragraph(category.value, styles["Heading2"]))
        elements.append(chart_table(rows, allergens))

    if share_link and fits_in_qr(share_link):
        elements += [Spacer(1, 16), Paragraph("Scan to open this chart:", styles["Normal"]), qr_drawing(share_link, 96)]

    doc.build(elements, onFirstPage=_draw_footer, onLaterPages=_draw_footer)
    return buf.getvalue()
