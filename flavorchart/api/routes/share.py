from fastapi import APIRouter, Depends, HTTPException, Query, Response

from flavorchart.api.serializers import engine_state
from flavorchart.api.session import get_engine, qr_renderer
from flavorchart.infra.qr_utils import fits_in_qr
from flavorchart.logic.selection.engine import SelectionEngine
from flavorchart.utilities.config import SHARE_BASE_URL
from flavorchart.utilities.validators import ShareApplyInput

router = APIRouter(prefix="/api/share")


@router.get("")
def get_share(base_url: str = Query(default=SHARE_BASE_URL), engine: SelectionEngine = Depends(get_engine)):
    """Current share token and link; `scannable` tells whether the link fits in a QR code."""
    link = engine.share_link(base_url)
    return {
        "token": engine.share_token(),
        "url": link,
        "length": len(link),
        "scannable": fits_in_qr(link),
    }


@router.post("/apply")
def apply_share(payload: ShareApplyInput, engine: SelectionEngine = Depends(get_engine)):
    error = engine.apply_share_token(payload.token)
    return {"applied": error is None, "error": error, "state": engine_state(engine)}


@router.get("/qr.svg")
async def share_qr(base_url: str = Query(default=SHARE_BASE_URL), engine: SelectionEngine = Depends(get_engine)):
    link = engine.share_link(base_url)
    if not fits_in_qr(link):
        raise HTTPException(status_code=413, detail="Share link is too long for a QR code")
    svg = await qr_renderer.render(link)
    if svg is None:
        # A newer render superseded this one
        raise HTTPException(status_code=409, detail="QR rendering superseded, retry")
    return Response(content=svg, media_type="image/svg+xml")
