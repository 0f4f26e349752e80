"""Minimal in-browser GUI served at the root path."""

from functools import lru_cache
from importlib.resources import files

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["gui"])


@lru_cache
def load_index_html() -> str:
    return (files("mcp_relay") / "static" / "index.html").read_text(encoding="utf-8")


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index() -> HTMLResponse:
    """Serve the chat and manual tool-call page."""
    return HTMLResponse(content=load_index_html())
