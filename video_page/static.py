import os
import stat

from starlette.concurrency import run_in_threadpool
from starlette.responses import RedirectResponse
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

from .listing import listing_url


class VideoFiles(StaticFiles):
    """Raw file bytes under the serving root.

    Directories have no static representation; GET/HEAD on one redirects to
    the listing page for the same location so it goes through the caller
    check. Without sub-path navigation only the root directory redirects.
    """

    def __init__(self, *, directory, allow_subpaths: bool = True, **kwargs):
        super().__init__(directory=directory, **kwargs)
        self.allow_subpaths = allow_subpaths

    async def get_response(self, path: str, scope: Scope):
        if scope["method"] in ("GET", "HEAD"):
            _, stat_result = await run_in_threadpool(self.lookup_path, path)
            if stat_result is not None and stat.S_ISDIR(stat_result.st_mode):
                relative = "" if path in (".", "") else path.replace(os.sep, "/").strip("/")
                if relative == "" or self.allow_subpaths:
                    return RedirectResponse(listing_url(relative), status_code=307)
        return await super().get_response(path, scope)
