import logging
import os
import pathlib
from urllib.parse import quote
from typing import Optional, Union

import json5
from pydantic import ValidationError

from core.config import UPLOADS_URL
from core.exceptions import (
    PageNotFound,
    PageReadError,
    PageValidationError,
    UploadError,
)
from model.page import AircraftPage, NationPage, parse_page

PAGE_SUFFIX = ".json5"
LOADOUT_SUFFIX = "-loadout"

AnyPage = Union[NationPage, AircraftPage]


def new_page(page_type: str, fields: dict) -> AnyPage:
    """Build a page of the given type from submitted form fields"""
    try:
        return parse_page({**fields, "type": page_type})
    except ValidationError as e:
        raise PageValidationError(_describe(e)) from e


def _describe(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in e.errors()
    )


class PageStore:
    """Pages persisted as one JSON5 file per slug, plus loadout image uploads"""

    def __init__(self, pages_dir: pathlib.Path, uploads_dir: pathlib.Path):
        self.pages_dir = pathlib.Path(pages_dir)
        self.uploads_dir = pathlib.Path(uploads_dir)

    def initialize(self):
        """Create storage directories"""
        self.pages_dir.mkdir(parents=True, exist_ok=True)
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, slug: str) -> Optional[pathlib.Path]:
        if not slug or slug in (".", "..") or "/" in slug or os.sep in slug:
            return None
        return self.pages_dir / f"{slug}{PAGE_SUFFIX}"

    def _existing_path(self, slug: str) -> pathlib.Path:
        path = self._path(slug)
        if path is None or not path.is_file():
            raise PageNotFound(slug)
        return path

    def _write(self, path: pathlib.Path, page: AnyPage):
        content = json5.dumps(page.model_dump(), indent=2, ensure_ascii=False)
        path.write_text(content, encoding="utf-8")

    def validate_slug(self, page: AnyPage) -> str:
        """Return the page's slug, rejecting slugs that cannot name a file"""
        slug = page.slug
        if self._path(slug) is None:
            raise PageValidationError(f"title does not produce a usable slug: {page.title!r}")
        return slug

    def create(self, page: AnyPage) -> str:
        """Write the page under its slug, overwriting any existing page"""
        slug = self.validate_slug(page)
        self._write(self._path(slug), page)
        logging.info(f"Saved {page.type} page {slug}")
        return slug

    def get(self, slug: str) -> AnyPage:
        path = self._existing_path(slug)
        try:
            data = json5.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PageReadError(slug, str(e)) from e

        if not isinstance(data, dict):
            raise PageReadError(slug, "stored content is not an object")
        try:
            return parse_page(data)
        except ValidationError as e:
            raise PageReadError(slug, _describe(e)) from e

    def update(
        self, slug: str, fields: dict, loadout_img: Optional[str] = None
    ) -> AnyPage:
        """
        Replace a stored page with a fresh record of the same type
        Args:
            slug: Key of the existing page
            fields: Submitted form fields, missing ones become empty
            loadout_img: New image path, keeps the stored one when None
        Returns:
            The page as written
        """
        existing = self.get(slug)
        title = fields.get("title") or ""
        about = fields.get("about") or ""

        if isinstance(existing, NationPage):
            data = {
                "title": title,
                "about": about,
                "techtree": fields.get("techtree") or "",
            }
        elif isinstance(existing, AircraftPage):
            data = {
                "title": title,
                "about": about,
                "playstyle": fields.get("playstyle") or "",
                "proscons": fields.get("proscons") or "",
                "trivia": fields.get("trivia") or "",
                "loadout_img": loadout_img
                if loadout_img is not None
                else existing.loadout_img,
            }
        else:
            raise TypeError(f"Unsupported page type: {type(existing).__name__}")

        page = new_page(existing.type, data)
        self._write(self._existing_path(slug), page)
        logging.info(f"Updated {page.type} page {slug}")
        return page

    def delete(self, slug: str) -> bool:
        """Remove a page, returning whether it existed"""
        path = self._path(slug)
        if path is None or not path.is_file():
            return False
        path.unlink()
        logging.info(f"Deleted page {slug}")
        return True

    def list_slugs(self) -> list[str]:
        if not self.pages_dir.is_dir():
            return []
        return sorted(p.stem for p in self.pages_dir.glob(f"*{PAGE_SUFFIX}"))

    def save_upload(self, slug: str, filename: str, content: bytes) -> str:
        """Store a loadout image for the page and return its public URL"""
        if self._path(slug) is None:
            raise UploadError(f"Invalid slug for upload: {slug!r}")

        ext = pathlib.PurePath(filename or "").suffix
        name = f"{slug}{LOADOUT_SUFFIX}{ext}"
        try:
            (self.uploads_dir / name).write_bytes(content)
        except OSError as e:
            raise UploadError(f"Failed to store upload {name}: {e}") from e

        logging.info(f"Stored upload {name}")
        return f"{UPLOADS_URL}/{quote(name)}"

    def upload_path(self, name: str) -> pathlib.Path:
        """Locate a stored upload by file name"""
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            raise PageNotFound(name)
        path = self.uploads_dir / name
        if not path.is_file():
            raise PageNotFound(name)
        return path
