# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""FastAPI server for the React frontend: eligibility engine, document progress, health."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, List


# Load .env first so PETITIONOPS_* overrides are visible to load_config (for uvicorn and run_api)
def _load_env() -> None:
    from dotenv import load_dotenv

    # 1) Repo root .env is primary; override so file wins over empty shell vars
    _repo_root = Path(__file__).resolve().parent.parent.parent
    _env_file = _repo_root / ".env"
    if _env_file.exists():
        load_dotenv(_env_file, override=True)
    # 2) Current working directory .env
    load_dotenv()


_load_env()

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from petitionops import __version__
from petitionops.api.eligibility_routes import router as eligibility_router
from petitionops.core.catalog import get_catalog
from petitionops.core.documents import DEFAULT_CHECKLIST, completion_report
from petitionops.core.settings import get_config

logger = logging.getLogger(__name__)


def _collect_api_routes(app: FastAPI) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for r in app.routes:
        path = getattr(r, "path", "") or ""
        if not path.startswith("/api/"):
            continue
        methods = list(getattr(r, "methods", set) or [])
        out.append({"path": path, "methods": sorted(methods), "name": getattr(r, "name", "") or ""})
    return out


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup: config summary, catalog size, route count."""
    cfg = get_config()
    logger.info(
        "[CONFIG] default_category=%s clear_on_category_switch=%s max_sessions=%d",
        cfg.selection.default_category,
        cfg.selection.clear_on_category_switch,
        cfg.sessions.max_sessions,
    )
    logger.info("[CATALOG] %d visa categories loaded", len(get_catalog()))
    logger.info("[ROUTES] registered=%s", len(_collect_api_routes(app)))
    yield


app = FastAPI(title="PetitionOps API", version=__version__, lifespan=_lifespan)

app.include_router(eligibility_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_config().api.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/ops/routes")
def api_ops_routes() -> list:
    """Route manifest: only /api/ routes. path, methods, name. For debugging 404s."""
    return _collect_api_routes(app)


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "status": "healthy", "version": __version__}


@app.get("/api/documents/checklist")
def api_documents_checklist() -> Dict[str, Any]:
    return {"categories": [c.to_dict() for c in DEFAULT_CHECKLIST]}


@app.post("/api/documents/progress")
async def api_documents_progress(request: Request) -> Dict[str, Any]:
    """
    Upload completion. Body: { "uploaded": { "<document category>": count, ... } }.
    Returns overall and per-category { uploaded, total, progress_percent }.
    """
    try:
        body = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    uploaded = (body or {}).get("uploaded") if isinstance(body, dict) else None
    if uploaded is None:
        uploaded = {}
    if not isinstance(uploaded, dict):
        raise HTTPException(status_code=400, detail="uploaded must be an object of category -> count")
    return completion_report(uploaded)


def run_api() -> None:
    """Serve the API with uvicorn on the configured host/port."""
    import uvicorn

    logging.basicConfig(
        level=logging.DEBUG if get_config().debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    cfg = get_config().api
    uvicorn.run(app, host=cfg.host, port=cfg.port)


if __name__ == "__main__":
    run_api()
