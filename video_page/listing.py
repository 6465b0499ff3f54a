"""Directory listing handler.

Every listing request goes through the same steps: check the caller,
resolve the requested sub-path under the serving root, enumerate the
directory and render it as HTML. Each step raises a ``ListingError``
subclass which the app turns into a plain-text response.
"""

import logging
import os
from datetime import datetime
from pathlib import Path, PurePosixPath
from urllib.parse import quote

import jinja2
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from .auth import CallerPolicy, allow_only, authorize
from .config import STATIC_PREFIX, ServerConfig
from .errors import EnumerationError, MalformedPathError, PathEscapeError, RenderError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class DirectoryEntry(BaseModel):
    name: str
    path: str
    is_dir: bool
    mod_time: str = ""


# ---------- helpers ----------


def resolve_listing_path(root: Path, sub_path: str) -> tuple[str, Path]:
    """Map a request path onto a directory inside ``root``.

    Returns the normalized relative path ("" for the root itself) and the
    absolute directory. Containment is checked per path component, so a
    root of ``/data/videos`` never admits ``/data/videos-backup``.
    """
    relative = sub_path.lstrip("/")
    if "\x00" in relative:
        raise MalformedPathError()
    try:
        base = Path(root).resolve()
        candidate = (base / relative).resolve()
    except (OSError, ValueError) as e:
        raise MalformedPathError() from e

    if not candidate.is_relative_to(base):
        logger.warning("Rejected path outside serving root: %r", sub_path)
        raise PathEscapeError()

    normalized = candidate.relative_to(base).as_posix()
    return ("" if normalized == "." else normalized), candidate


def _url_quote(path: str) -> str:
    # Names that are not valid UTF-8 arrive surrogate-escaped; quote the raw bytes
    return quote(os.fsencode(path))


def display_name(name: str) -> str:
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def entry_url(static_prefix: str, relative: str, name: str, is_dir: bool = False) -> str:
    parts = [p for p in (relative, name) if p]
    url = static_prefix.rstrip("/") + "/" + _url_quote("/".join(parts))
    return url + "/" if is_dir else url


def listing_url(relative: str) -> str:
    return "/" + _url_quote(relative) + "/" if relative else "/"


def _inside(entry: os.DirEntry, root: Path) -> bool:
    try:
        return Path(entry.path).resolve().is_relative_to(root)
    except (OSError, ValueError):
        return False


def _mod_time(entry: os.DirEntry) -> str:
    # The entry may vanish between scandir and stat
    try:
        return datetime.fromtimestamp(entry.stat().st_mtime).strftime(TIME_FORMAT)
    except OSError:
        return ""


def list_entries(directory: Path, relative: str = "",
                 static_prefix: str = STATIC_PREFIX,
                 root: Path | None = None) -> list[DirectoryEntry]:
    """Visible entries of ``directory`` in scandir order.

    When ``root`` is given, symlinks resolving outside it are left out since
    neither the listing nor the file mount would follow them.
    """
    try:
        with os.scandir(directory) as it:
            found = list(it)
    except OSError as e:
        logger.error("Cannot read %s: %s", directory, e)
        raise EnumerationError() from e

    entries = []
    for entry in found:
        # Hidden files, including the "._" metadata files macOS leaves behind
        if entry.name.startswith("."):
            continue
        if root is not None and entry.is_symlink() and not _inside(entry, root):
            continue
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        entries.append(DirectoryEntry(
            name=display_name(entry.name),
            path=entry_url(static_prefix, relative, entry.name, is_dir),
            is_dir=is_dir,
            mod_time=_mod_time(entry),
        ))
    return entries


def render_listing(request: Request, relative: str, entries: list[DirectoryEntry]):
    parent = None
    if relative:
        up = PurePosixPath(relative).parent.as_posix()
        parent = listing_url("" if up == "." else up)

    context = {
        "entries": entries,
        "location": listing_url(relative),
        "parent": parent,
    }
    try:
        return templates.TemplateResponse(request, "listing.html", context)
    except jinja2.TemplateError as e:
        logger.exception("Listing template failed")
        raise RenderError() from e


# ---------- router ----------


def create_listing_router(config: ServerConfig, policy: CallerPolicy | None = None) -> APIRouter:
    """Routes for the listing page.

    With ``config.allow_subpaths`` off only ``/`` is served and any other
    path falls through to the 404 handler.
    """
    if policy is None:
        policy = allow_only(config.allowed_caller)
    router = APIRouter()

    def handle(request: Request, sub_path: str):
        authorize(request, policy)
        relative, directory = resolve_listing_path(config.serving_root, sub_path)
        entries = list_entries(directory, relative, config.static_prefix,
                               root=Path(config.serving_root).resolve())
        return render_listing(request, relative, entries)

    @router.api_route("/", methods=["GET", "HEAD"], response_class=HTMLResponse)
    def list_root(request: Request):
        return handle(request, "")

    if config.allow_subpaths:
        @router.api_route("/{sub_path:path}", methods=["GET", "HEAD"],
                          response_class=HTMLResponse)
        def list_sub_path(request: Request, sub_path: str):
            return handle(request, sub_path)

    return router
