"""FastAPI application serving a documentation model as HTML and JSON."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from .. import __version__
from ..logging import get_logger
from ..models import Documentation
from ..render import format_signature, format_type
from ..serializer import decl_summary, package_to_dict, to_dict

DEFAULT_TEMPLATE = Path(__file__).parent / "templates" / "index.html"


class HealthResponse(BaseModel):
    status: str
    packages: int


class TypesResponse(BaseModel):
    types: Dict[str, str]


def _templates_for(template_path: Path) -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(template_path.parent))
    templates.env.filters["format_type"] = format_type
    templates.env.filters["signature"] = format_signature
    templates.env.filters["summary"] = decl_summary
    return templates


def create_app(
    documentation: Documentation,
    template_path: Optional[Path] = None,
) -> FastAPI:
    """Create the application; the model is shared read-only by every request."""
    template = Path(template_path) if template_path is not None else DEFAULT_TEMPLATE
    if not template.is_file():
        raise FileNotFoundError(f"Template not found: {template}")

    templates = _templates_for(template)
    payload = to_dict(documentation)
    types_index = documentation.collect_types()

    app = FastAPI(title="godox", version=__version__)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", packages=len(documentation.packages))

    @app.get("/api/packages")
    async def packages() -> JSONResponse:
        return JSONResponse(content=payload)

    @app.get("/api/packages/{name:path}")
    async def package(name: str) -> JSONResponse:
        found = documentation.package(name)
        if found is None:
            raise HTTPException(status_code=404, detail=f"Unknown package: {name}")
        return JSONResponse(content=package_to_dict(found))

    @app.get("/api/types", response_model=TypesResponse)
    async def types() -> TypesResponse:
        return TypesResponse(types=types_index)

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        context: Dict[str, Any] = {"packages": documentation.packages, "types": types_index}
        return templates.TemplateResponse(request=request, name=template.name, context=context)

    return app


def run_service(
    documentation: Documentation,
    host: str = "127.0.0.1",
    port: int = 8080,
    template_path: Optional[Path] = None,
) -> None:  # pragma: no cover - integration path
    app = create_app(documentation, template_path)
    get_logger("service").info("Listening on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
