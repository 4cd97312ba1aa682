import os

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from utils.errors import NotFound

router = APIRouter(tags=["frontend"])


def _page(request: Request, name: str) -> FileResponse:
    path = os.path.join(request.app.state.frontend_dir, name)
    if not os.path.isfile(path):
        raise NotFound("Page not found")
    return FileResponse(path, media_type="text/html")


@router.get("/", include_in_schema=False)
def index(request: Request):
    return _page(request, "index.html")


@router.get("/admin", include_in_schema=False)
def admin(request: Request):
    return _page(request, "admin.html")
