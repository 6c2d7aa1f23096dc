from fastapi import (
    FastAPI,
    Request,
    Depends,
    HTTPException,
)
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from typing import Optional
import logging

from flavorchart.api.serializers import engine_state
from flavorchart.api.session import get_engine, reference_loader
from flavorchart.logic.normalization.normalizer import normalize_category
from flavorchart.logic.selection.capabilities import QueryParams
from flavorchart.logic.selection.engine import SelectionEngine
from flavorchart.utilities.config import SHARE_BASE_URL, TEMPLATES_DIR
from flavorchart.utilities.constants import (
    CHART_TITLE, DISCLAIMER, NAME_COLUMN, SOURCE_PDF_URL, SOURCE_TITLE, SOURCE_URL
)
from flavorchart.utilities.export_import import printed_label
from flavorchart.utilities.validators import (
    CategoryToggleInput, ManualFlavorInput, SearchInput, ToggleInput, UiStateInput
)

# Routers
from flavorchart.api.routes import export, flavors, share

# Logging
logger = logging.getLogger("flavorchart_app")

# Initialize FastAPI app
app = FastAPI(title="Flavor Allergen Chart API")

# Include routers
app.include_router(flavors.router)
app.include_router(share.router)
app.include_router(export.router)

# Templates
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@app.on_event("startup")
async def _load_reference_catalog():
    """Load the reference flavors once the app starts; failures leave manual flavors only."""
    await reference_loader.load(get_engine())


# -------------------- UI PAGES --------------------
def _render_chart(request: Request, engine: SelectionEngine, share_error: Optional[str] = None):
    return templates.TemplateResponse(
        request,
        "chart.html",
        {
            "title": CHART_TITLE,
            "printed_at": printed_label(),
            "store_label": engine.ui.store_label,
            "name_column": NAME_COLUMN,
            "allergens": engine.allergens,
            "groups": engine.grouped_output,
            "share_error": share_error,
            "reference_status": engine.reference_status,
            "source_title": SOURCE_TITLE,
            "source_url": SOURCE_URL,
            "source_pdf_url": SOURCE_PDF_URL,
            "disclaimer": DISCLAIMER,
            "share_url": engine.share_link(SHARE_BASE_URL),
        },
    )


@app.get("/", response_class=HTMLResponse)
def main_page(request: Request, engine: SelectionEngine = Depends(get_engine)):
    """Print view; a `share` query parameter is applied before rendering."""
    share_error = engine.apply_link_context(QueryParams(dict(request.query_params)))
    return _render_chart(request, engine, share_error)


@app.get("/print", response_class=HTMLResponse)
def print_page(request: Request, engine: SelectionEngine = Depends(get_engine)):
    return _render_chart(request, engine)


# -------------------- API: State --------------------
@app.get("/api/state")
def get_state(engine: SelectionEngine = Depends(get_engine)):
    return engine_state(engine)


@app.post("/api/reference/reload")
async def reload_reference(engine: SelectionEngine = Depends(get_engine)):
    applied = await reference_loader.load(engine)
    return {"applied": applied, "error": reference_loader.last_error, "state": engine_state(engine)}


# -------------------- API: Selection --------------------
@app.post("/api/selection/toggle")
def toggle_selection(payload: ToggleInput, engine: SelectionEngine = Depends(get_engine)):
    engine.toggle_selected(payload.name)
    return engine_state(engine)


@app.post("/api/selection/clear")
def clear_selection(engine: SelectionEngine = Depends(get_engine)):
    engine.clear_selected()
    return engine_state(engine)


@app.post("/api/selection/select-all-reference")
def select_all_reference(engine: SelectionEngine = Depends(get_engine)):
    engine.select_all_reference()
    return engine_state(engine)


@app.post("/api/selection/select-visible")
def select_visible(engine: SelectionEngine = Depends(get_engine)):
    engine.select_all_visible()
    return engine_state(engine)


@app.post("/api/selection/clear-visible")
def clear_visible(engine: SelectionEngine = Depends(get_engine)):
    engine.clear_visible()
    return engine_state(engine)


# -------------------- API: Manual flavors --------------------
@app.post("/api/manual")
def add_manual_flavor(payload: ManualFlavorInput, engine: SelectionEngine = Depends(get_engine)):
    record = payload.model_dump(exclude_none=True)
    flavor = engine.add_manual_item(record)
    if flavor is None:
        raise HTTPException(status_code=400, detail="Please enter a flavor name.")
    return engine_state(engine)


# -------------------- API: Filters --------------------
@app.put("/api/search")
def set_search(payload: SearchInput, engine: SelectionEngine = Depends(get_engine)):
    engine.set_search_text(payload.text)
    return engine_state(engine)


@app.put("/api/ui")
def update_ui(payload: UiStateInput, engine: SelectionEngine = Depends(get_engine)):
    engine.apply_ui(payload.to_overlay())
    return engine_state(engine)


@app.post("/api/categories/toggle")
def toggle_category(payload: CategoryToggleInput, engine: SelectionEngine = Depends(get_engine)):
    engine.toggle_category(normalize_category(payload.category))
    return engine_state(engine)


@app.post("/api/categories/reset")
def reset_categories(engine: SelectionEngine = Depends(get_engine)):
    engine.reset_categories()
    return engine_state(engine)
