# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""Eligibility API: /api/eligibility/*: catalog, stateless evaluation, selection sessions."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request

from petitionops.core.catalog import UNKNOWN_CATEGORY, CategoryDefinition, UnknownCategoryError, get_catalog
from petitionops.core.eligibility import evaluate, selected_criteria
from petitionops.core.selection import (
    UNKNOWN_CRITERION,
    SelectionSessionStore,
    SelectionState,
    UnknownCriterionError,
    UnknownSessionError,
)
from petitionops.core.settings import get_config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/eligibility", tags=["eligibility"])

# Where the UI should send the applicant next
NEXT_STEP_REVIEW = "review"
NEXT_STEP_DOCUMENTS = "documents"

_session_store: Optional[SelectionSessionStore] = None


def get_session_store() -> SelectionSessionStore:
    """Process-wide session store, built from config on first use."""
    global _session_store
    if _session_store is None:
        cfg = get_config()
        _session_store = SelectionSessionStore(
            get_catalog(),
            clear_on_category_switch=cfg.selection.clear_on_category_switch,
            seed_default=cfg.selection.seed_default,
            max_sessions=cfg.sessions.max_sessions,
        )
    return _session_store


def reset_session_store(store: Optional[SelectionSessionStore] = None) -> None:
    """Replace (or drop, when None) the process-wide store. Used by tests."""
    global _session_store
    _session_store = store


async def _read_json(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="JSON body must be an object")
    return body


def _selected_from_body(body: Dict[str, Any]) -> Optional[List[str]]:
    raw = body.get("selected")
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(x, str) for x in raw):
        raise HTTPException(status_code=400, detail="selected must be a list of criterion ids")
    return raw


def _unknown_category(category_id: Any) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"reason_code": UNKNOWN_CATEGORY, "category": category_id},
    )


def _require_definition(category_id: Any) -> CategoryDefinition:
    if not isinstance(category_id, str) or not category_id.strip():
        raise HTTPException(status_code=400, detail="Missing category")
    lookup = get_session_store().catalog.lookup(category_id)
    if lookup.definition is None:
        raise _unknown_category(category_id)
    return lookup.definition


def _evaluation_payload(state: SelectionState, session_id: Optional[str] = None) -> Dict[str, Any]:
    result = evaluate(state.definition, state)
    out: Dict[str, Any] = {
        "category": state.category.value,
        "selected_ids": sorted(state.selected_ids),
        "evaluation": result.to_dict(),
        "progress": result.progress_view(),
        "gating": result.gating_view(),
        "review": [c.to_dict() for c in selected_criteria(state.definition, state)],
        "next_step": NEXT_STEP_REVIEW if result.eligible else NEXT_STEP_DOCUMENTS,
    }
    if session_id is not None:
        out["session_id"] = session_id
    return out


def _get_state(session_id: str) -> SelectionState:
    try:
        return get_session_store().get(session_id)
    except UnknownSessionError as e:
        raise HTTPException(status_code=404, detail={"reason_code": e.reason_code, "session_id": session_id})


@router.get("/categories")
def eligibility_categories() -> Dict[str, Any]:
    """Catalog summary, in catalog order."""
    return {"categories": [d.summary_dict() for d in get_session_store().catalog]}


@router.get("/categories/{category_id}")
def eligibility_category(category_id: str) -> Dict[str, Any]:
    """Full category definition. 404 (UNKNOWN_CATEGORY) for ids outside the catalog."""
    return _require_definition(category_id).to_dict()


@router.post("/evaluate")
async def eligibility_evaluate(request: Request) -> Dict[str, Any]:
    """
    Stateless evaluation. Body: { "category": string, "selected": [criterion ids] }.
    Unknown ids in selected are reported under evaluation.stale_ids and not counted.
    """
    body = await _read_json(request)
    definition = _require_definition(body.get("category"))
    state = SelectionState(definition, _selected_from_body(body) or [])
    return _evaluation_payload(state)


@router.post("/sessions")
async def eligibility_create_session(request: Request) -> Dict[str, Any]:
    """Open a selection session. Body: { "category"?: string, "selected"?: [criterion ids] }."""
    body = await _read_json(request)
    category_id = body.get("category") or get_config().selection.default_category
    _require_definition(category_id)
    selected = _selected_from_body(body)
    try:
        session_id, state = get_session_store().create(category_id, selected)
    except UnknownCategoryError:
        raise _unknown_category(category_id)
    except UnknownCriterionError as e:
        raise HTTPException(
            status_code=422,
            detail={
                "reason_code": e.reason_code,
                "criterion_ids": list(e.criterion_ids),
                "category": e.category.value,
            },
        )
    logger.info("[API] Opened selection session %s for %s", session_id, state.category.value)
    return _evaluation_payload(state, session_id)


@router.get("/sessions/{session_id}")
def eligibility_get_session(session_id: str) -> Dict[str, Any]:
    return _evaluation_payload(_get_state(session_id), session_id)


@router.post("/sessions/{session_id}/toggle")
async def eligibility_toggle(session_id: str, request: Request) -> Dict[str, Any]:
    """
    Flip one criterion. Body: { "criterion_id": string }.
    Unknown criterion -> 422 UNKNOWN_CRITERION; selection unchanged.
    """
    state = _get_state(session_id)
    body = await _read_json(request)
    criterion_id = body.get("criterion_id")
    if not isinstance(criterion_id, str) or not criterion_id:
        raise HTTPException(status_code=400, detail="Missing criterion_id")
    result = state.toggle(criterion_id)
    if not result.accepted:
        raise HTTPException(
            status_code=422,
            detail={
                "reason_code": result.reason_code or UNKNOWN_CRITERION,
                "criterion_id": criterion_id,
                "category": state.category.value,
            },
        )
    payload = _evaluation_payload(state, session_id)
    payload["toggled"] = {"criterion_id": criterion_id, "selected": result.selected}
    return payload


@router.put("/sessions/{session_id}/category")
async def eligibility_switch_category(session_id: str, request: Request) -> Dict[str, Any]:
    """Rebind a session to another category. Body: { "category": string }."""
    _get_state(session_id)
    body = await _read_json(request)
    category_id = body.get("category")
    _require_definition(category_id)
    try:
        state = get_session_store().switch_category(session_id, category_id)
    except UnknownCategoryError:
        raise _unknown_category(category_id)
    except UnknownSessionError as e:
        raise HTTPException(status_code=404, detail={"reason_code": e.reason_code, "session_id": session_id})
    return _evaluation_payload(state, session_id)


@router.delete("/sessions/{session_id}")
def eligibility_discard_session(session_id: str) -> Dict[str, Any]:
    try:
        get_session_store().discard(session_id)
    except UnknownSessionError as e:
        raise HTTPException(status_code=404, detail={"reason_code": e.reason_code, "session_id": session_id})
    return {"ok": True, "session_id": session_id}
