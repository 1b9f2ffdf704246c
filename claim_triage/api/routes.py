"""API route definitions for the claim triage service."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Literal

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile

from claim_triage.api.schemas import (
    AnalyzeRequest,
    DiscoverRequest,
    RuleDelete,
    RuleIn,
    RulePayload,
)
from claim_triage.config import load_scoring_weights
from claim_triage.engine.analyzer import analyze
from claim_triage.engine.column_mapper import LOGICAL_KEYS
from claim_triage.engine.discovery import discover
from claim_triage.engine.models import RuleSets
from claim_triage.graph.workflow import run_triage_workflow
from claim_triage.services.rule_store import (
    ClientNotFoundError,
    RuleNotFoundError,
    RuleStore,
    RuleStoreError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_EXTENSIONS: set[str] = {".xlsx"}

RuleTypeParam = Literal["edit", "note"]


def get_rule_store(request: Request) -> RuleStore:
    """Return the rule store attached to the running application."""
    return request.app.state.rule_store


def _validate_mapping(mapping: dict[str, str]) -> dict[str, str]:
    """Validate that a column mapping only uses known logical keys.

    Args:
        mapping: Logical field → spreadsheet header.

    Returns:
        The mapping with blank headers removed and headers trimmed.

    Raises:
        HTTPException: If the mapping names an unknown logical field.
    """
    unknown = sorted(set(mapping) - set(LOGICAL_KEYS))
    if unknown:
        logger.warning("Rejected column mapping with unknown fields: %s", unknown)
        raise HTTPException(
            status_code=400,
            detail=f"Unknown mapping field(s) {unknown}. Allowed: {list(LOGICAL_KEYS)}.",
        )
    return {key: header.strip() for key, header in mapping.items() if header.strip()}


def _validate_spreadsheet(file: UploadFile) -> None:
    """Validate that the uploaded file is an XLSX workbook.

    Raises:
        HTTPException: If the file extension is not ``.xlsx``.
    """
    extension = Path(file.filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        logger.warning("Invalid file extension: %s", extension)
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file extension '{extension}'. Only .xlsx files are accepted.",
        )


async def _save_to_tmp(file: UploadFile) -> Path:
    """Persist the uploaded file to a temporary directory.

    Raises:
        HTTPException: If the file cannot be saved.
    """
    try:
        tmp_dir = Path(tempfile.mkdtemp(prefix="triage_"))
        destination = tmp_dir / Path(file.filename or "upload.xlsx").name
        content = await file.read()
        destination.write_bytes(content)
        logger.info("Saved uploaded file to %s (%d bytes)", destination, len(content))
        return destination
    except Exception as exc:
        logger.exception("Failed to save uploaded file")
        raise HTTPException(status_code=500, detail="Failed to save uploaded file.") from exc


def _fetch_mapping(store: RuleStore, client_id: str) -> dict[str, str]:
    try:
        return store.fetch_column_mapping(client_id)
    except ClientNotFoundError as exc:
        logger.warning("Unknown client: %s", client_id)
        raise HTTPException(status_code=404, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Client configuration
# ---------------------------------------------------------------------------


@router.put("/api/clients/{client_id}/mapping", status_code=200)
async def save_mapping(
    client_id: str,
    mapping: dict[str, str],
    store: RuleStore = Depends(get_rule_store),
) -> dict[str, Any]:
    """Create or replace a client's column mapping."""
    cleaned = _validate_mapping(mapping)
    store.save_column_mapping(client_id, cleaned)
    return {"client_id": client_id, "mapping": cleaned}


@router.get("/api/clients/{client_id}/mapping", status_code=200)
async def get_mapping(
    client_id: str,
    store: RuleStore = Depends(get_rule_store),
) -> dict[str, Any]:
    return {"client_id": client_id, "mapping": _fetch_mapping(store, client_id)}


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@router.get("/api/clients/{client_id}/rules", status_code=200)
async def list_rules(
    client_id: str,
    rule_type: RuleTypeParam = Query(..., alias="type"),
    store: RuleStore = Depends(get_rule_store),
) -> list[dict[str, Any]]:
    """List a client's edit or note rules joined with their categories."""
    logger.info("Fetching %s rules for client=%s", rule_type, client_id)
    rules = store.list_edit_rules(client_id) if rule_type == "edit" else store.list_note_rules(client_id)
    return [RulePayload.from_rule(rule).model_dump() for rule in rules]


@router.post("/api/clients/{client_id}/rules", status_code=201)
async def save_rules(
    client_id: str,
    rules: list[RuleIn],
    rule_type: RuleTypeParam = Query(..., alias="type"),
    store: RuleStore = Depends(get_rule_store),
) -> dict[str, Any]:
    """Upsert triaged rules for a client.

    Raises:
        HTTPException: 400 for an empty body or an unknown category.
    """
    if not rules:
        logger.warning("Rejected empty rule list for client=%s", client_id)
        raise HTTPException(status_code=400, detail="Request body must be a non-empty array of rules.")
    try:
        saved = store.persist_rules(client_id, rule_type, [rule.model_dump() for rule in rules])
    except RuleStoreError as exc:
        logger.warning("Failed to save rules for client=%s: %s", client_id, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"message": "Rules saved successfully.", "saved": saved}


@router.delete("/api/clients/{client_id}/rules", status_code=200)
async def delete_rule(
    client_id: str,
    body: RuleDelete,
    rule_type: RuleTypeParam = Query(..., alias="type"),
    store: RuleStore = Depends(get_rule_store),
) -> dict[str, str]:
    try:
        store.delete_rule(client_id, rule_type, body.text)
    except RuleNotFoundError as exc:
        logger.warning("Rule not found for client=%s: %s", client_id, body.text)
        raise HTTPException(status_code=404, detail="Rule not found for the given client.") from exc
    return {"message": "Rule deleted successfully."}


# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------


@router.post("/api/clients/{client_id}/process", status_code=200)
async def process_spreadsheet(
    client_id: str,
    file: UploadFile = File(..., description="XLSX claims report to triage"),
    store: RuleStore = Depends(get_rule_store),
) -> dict[str, Any]:
    """Parse, analyze and run rule discovery over an uploaded claims report.

    Returns:
        The triage workflow output: claims, metrics, work queue and the
        uncategorized values awaiting triage.
    """
    _validate_spreadsheet(file)
    mapping = _fetch_mapping(store, client_id)
    rule_sets = store.fetch_rule_sets(client_id)
    saved_path = await _save_to_tmp(file)

    try:
        output = run_triage_workflow(client_id, str(saved_path), mapping, rule_sets)
    except ValueError as exc:
        logger.warning("Spreadsheet rejected for client=%s: %s", client_id, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Triage workflow failed for client=%s", client_id)
        raise HTTPException(status_code=500, detail="Failed to process the claims report.") from exc
    finally:
        shutil.rmtree(saved_path.parent, ignore_errors=True)

    logger.info("Claims report processed — client_id=%s file=%s", client_id, file.filename)
    return output


@router.post("/api/analyze", status_code=200)
def analyze_rows(payload: AnalyzeRequest) -> dict[str, Any]:
    """Classify and score already-parsed rows."""
    rule_sets = RuleSets(
        edit_rules=[rule.to_rule() for rule in payload.edit_rules],
        note_rules=[rule.to_rule() for rule in payload.note_rules],
    )
    result = analyze(payload.rows, payload.mapping, rule_sets, load_scoring_weights())
    return {
        "claims": [claim.to_dict() for claim in result.claims],
        "metrics": result.metrics.to_dict(),
    }


@router.post("/api/discover", status_code=200)
def discover_rules(payload: DiscoverRequest) -> dict[str, Any]:
    """List edit and note values not covered by the given rule texts."""
    result = discover(
        payload.rows,
        payload.mapping,
        set(payload.existing_edit_texts),
        set(payload.existing_note_texts),
        actionable_only=payload.actionable_only,
    )
    return {
        "edits": [item.to_dict() for item in result.edits],
        "notes": [item.to_dict() for item in result.notes],
    }


@router.get("/health", status_code=200)
async def health_check() -> dict[str, str]:
    """Liveness / readiness health check endpoint."""
    return {"status": "ok"}
