import logging
from fastapi import APIRouter

from flavorchart.infra.Reference_Repository import ReferenceLoadError, reading_from_reference
from flavorchart.infra.paths import MASTER_CSV

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/flavors")
def list_reference_flavors():
    """Raw reference rows from the master CSV: {"rows": [{name, attributes}]}."""
    try:
        rows = reading_from_reference(MASTER_CSV)
    except ReferenceLoadError as e:
        logger.error(f"Reference CSV unavailable: {e}")
        rows = []
    return {"rows": rows}
