import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from flavorchart.api.session import get_engine
from flavorchart.logic.selection.capabilities import FixedAnswer
from flavorchart.logic.selection.engine import SelectionEngine
from flavorchart.utilities.config import SHARE_BASE_URL
from flavorchart.utilities.constants import CONFIRM_MESSAGE
from flavorchart.utilities.export_import import ChartExporter, export_filename

router = APIRouter(prefix="/api/export")
logger = logging.getLogger(__name__)


def _require_confirmation(engine: SelectionEngine, confirmed: bool):
    """409 with the completeness question unless the client already answered yes."""
    if not engine.confirm_export(FixedAnswer(confirmed)):
        raise HTTPException(status_code=409, detail={
            "confirm": CONFIRM_MESSAGE,
            "selected": len(engine.selected_rows),
            "reference": engine.reference_count,
        })


def _attachment(filename: str):
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/pdf")
def export_pdf(confirmed: bool = Query(default=False),
               base_url: str = Query(default=SHARE_BASE_URL),
               engine: SelectionEngine = Depends(get_engine)):
    _require_confirmation(engine, confirmed)
    pdf = ChartExporter(engine).pdf_bytes(share_link=engine.share_link(base_url))
    logger.info(f"PDF export with {len(engine.output_rows)} flavors")
    return Response(content=pdf, media_type="application/pdf", headers=_attachment(export_filename("pdf")))


@router.get("/csv")
def export_csv(confirmed: bool = Query(default=False), engine: SelectionEngine = Depends(get_engine)):
    _require_confirmation(engine, confirmed)
    text = ChartExporter(engine).csv_text()
    return Response(content=text, media_type="text/csv; charset=utf-8", headers=_attachment(export_filename("csv")))
