from contextlib import asynccontextmanager
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, Form, UploadFile
from fastapi.responses import (
    FileResponse,
    HTMLResponse,
    JSONResponse,
    RedirectResponse,
)
from fastapi.staticfiles import StaticFiles

from core.config import STATIC_DIR
from core.exceptions import PageNotFound, PageValidationError, handle_exception
from core.storage import get_store
from model.page import AircraftPage
from services.page import PageStore, new_page
from services.render import RenderMode, render_message, render_page


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_store()
    store.initialize()
    logging.info(f"Page storage ready at {store.pages_dir}")

    yield


app = FastAPI(lifespan=lifespan, openapi_url=None)

app.mount("/static", StaticFiles(directory=STATIC_DIR, check_dir=False), name="static")


def html_message(heading: str, status_code: int) -> HTMLResponse:
    return HTMLResponse(content=render_message(heading), status_code=status_code)


def view_redirect(slug: str) -> RedirectResponse:
    return RedirectResponse(url=f"/pages/{quote(slug, safe='')}", status_code=303)


def chosen_upload(upload: Optional[UploadFile]) -> Optional[UploadFile]:
    """Return the upload only when a file was actually chosen"""
    if upload is None or not upload.filename:
        return None
    return upload


@app.get("/")
async def index():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/form.html")
async def nation_form():
    return FileResponse(STATIC_DIR / "form.html")


@app.get("/aircraft-form.html")
async def aircraft_form():
    return FileResponse(STATIC_DIR / "aircraft-form.html")


@app.get("/uploads/{name}")
async def uploaded_file(name: str, store: PageStore = Depends(get_store)):
    """Serve a stored loadout image"""
    try:
        return FileResponse(store.upload_path(name))
    except PageNotFound:
        return html_message("File not found", 404)


@app.post("/pages")
async def create_nation(
    title: str = Form(""),
    about: str = Form(""),
    techtree: str = Form(""),
    store: PageStore = Depends(get_store),
):
    """Create a nation page"""
    try:
        page = new_page(
            "nation", {"title": title, "about": about, "techtree": techtree}
        )
        slug = store.create(page)
        return view_redirect(slug)
    except PageValidationError as e:
        logging.warning(f"Rejected nation page: {e}")
        return html_message("Invalid page data", 400)
    except Exception as e:
        handle_exception(e, "Error creating page", source="web")
        return html_message("Error creating page", 500)


@app.post("/aircraft")
async def create_aircraft(
    title: str = Form(""),
    about: str = Form(""),
    playstyle: str = Form(""),
    proscons: str = Form(""),
    trivia: str = Form(""),
    loadout_img: Optional[UploadFile] = File(None),
    store: PageStore = Depends(get_store),
):
    """Create an aircraft page, storing the loadout image first"""
    fields = {
        "title": title,
        "about": about,
        "playstyle": playstyle,
        "proscons": proscons,
        "trivia": trivia,
    }
    try:
        page = new_page("aircraft", fields)
        store.validate_slug(page)

        upload = chosen_upload(loadout_img)
        if upload:
            content = await upload.read()
            page.loadout_img = store.save_upload(page.slug, upload.filename, content)

        slug = store.create(page)
        return view_redirect(slug)
    except PageValidationError as e:
        logging.warning(f"Rejected aircraft page: {e}")
        return html_message("Invalid page data", 400)
    except Exception as e:
        handle_exception(e, "Error creating aircraft", source="web")
        return html_message("Error creating aircraft", 500)


@app.get("/pages/{slug}")
async def view_page(slug: str, store: PageStore = Depends(get_store)):
    """Render a stored page"""
    try:
        page = store.get(slug)
        return HTMLResponse(content=render_page(page, RenderMode.VIEW))
    except PageNotFound:
        return html_message("Page not found", 404)
    except Exception as e:
        handle_exception(e, "Error loading page", source="web")
        return html_message("Error loading page", 500)


@app.get("/delete/{slug}")
async def delete_page(slug: str, store: PageStore = Depends(get_store)):
    """Delete a stored page"""
    try:
        if store.delete(slug):
            return JSONResponse({"success": True})
        return JSONResponse(
            {"success": False, "message": "Page not found"}, status_code=404
        )
    except Exception as e:
        handle_exception(e, "Error deleting page", source="web")
        return JSONResponse(
            {"success": False, "message": "Error deleting page"}, status_code=500
        )


@app.get("/edit.html")
async def edit_page(
    slug: Optional[str] = None, store: PageStore = Depends(get_store)
):
    """Render the edit form for a stored page"""
    if not slug:
        return RedirectResponse(url="/", status_code=302)

    try:
        page = store.get(slug)
        return HTMLResponse(content=render_page(page, RenderMode.EDIT, slug=slug))
    except PageNotFound:
        return html_message("Page not found", 404)
    except Exception as e:
        handle_exception(e, "Error loading edit page", source="web")
        return html_message("Error loading edit page", 500)


@app.post("/edit/{slug}")
async def update_page(
    slug: str,
    title: str = Form(""),
    about: str = Form(""),
    techtree: str = Form(""),
    playstyle: str = Form(""),
    proscons: str = Form(""),
    trivia: str = Form(""),
    loadout_img: Optional[UploadFile] = File(None),
    store: PageStore = Depends(get_store),
):
    """Replace a stored page, keeping its image unless a new one is uploaded"""
    fields = {
        "title": title,
        "about": about,
        "techtree": techtree,
        "playstyle": playstyle,
        "proscons": proscons,
        "trivia": trivia,
    }
    try:
        existing = store.get(slug)

        image_url = None
        upload = chosen_upload(loadout_img)
        if upload and isinstance(existing, AircraftPage):
            content = await upload.read()
            image_url = store.save_upload(slug, upload.filename, content)

        store.update(slug, fields, loadout_img=image_url)
        return view_redirect(slug)
    except PageNotFound:
        return html_message("Page not found", 404)
    except PageValidationError as e:
        logging.warning(f"Rejected update of {slug}: {e}")
        return html_message("Invalid page data", 400)
    except Exception as e:
        handle_exception(e, "Error updating page", source="web")
        return html_message("Error updating page", 500)


@app.get("/api/pages")
async def list_pages(store: PageStore = Depends(get_store)):
    """List stored page slugs"""
    try:
        result = store.list_slugs()
        return JSONResponse({"status": "success", "result": result})
    except Exception as e:
        handle_exception(e, "Failed to list pages", source="web")
        return JSONResponse(
            {"status": "error", "message": "Failed to list pages"}, status_code=500
        )
