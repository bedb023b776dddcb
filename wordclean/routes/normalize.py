from __future__ import annotations

from typing import Any

import pandas as pd
from fastapi import APIRouter, HTTPException

from wordclean.config import settings
from wordclean.errors import ConfigurationError
from wordclean.schemas.normalize import (
    DiagnosticsResponse,
    NormalizeRequest,
    NormalizeResponse,
    NormalizeSummary,
)
from wordclean.services.variable_spelling import VariableSpelling

router = APIRouter(tags=["normalize"])


def _to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    out = df.astype(object)
    out = out.where(out.notna(), None)
    return out.to_dict(orient="records")


def _build_frame(req: NormalizeRequest) -> pd.DataFrame:
    df = pd.DataFrame(req.data)
    if len(df) > settings.MAX_ROWS:
        raise HTTPException(
            status_code=413,
            detail=f"Too many rows: {len(df)} (limit {settings.MAX_ROWS})",
        )
    for col in req.categorical:
        if col not in df.columns:
            raise HTTPException(status_code=422, detail=f"Unknown categorical column: {col}")
        df[col] = df[col].astype("category")
    return df


def _build_wordlists(req: NormalizeRequest):
    if isinstance(req.wordlists, dict):
        return {name: pd.DataFrame(rows) for name, rows in req.wordlists.items()}
    return pd.DataFrame(req.wordlists)


# ─────────────────────────────────────────────────────────────────────────────
# Normalize
# ─────────────────────────────────────────────────────────────────────────────

@router.post("/normalize", response_model=NormalizeResponse)
def normalize_dataset(req: NormalizeRequest):
    df = _build_frame(req)
    group_ref = None
    if req.use_group:
        group_ref = req.group_ref if req.group_ref is not None else settings.DEFAULT_GROUP_REF
    report_diagnostics = (
        req.report_diagnostics
        if req.report_diagnostics is not None
        else settings.REPORT_DIAGNOSTICS
    )

    try:
        engine = VariableSpelling(
            df, _build_wordlists(req), group_ref=group_ref, sort_by=req.sort_by
        )
    except ConfigurationError as ex:
        raise HTTPException(status_code=422, detail=str(ex))

    summary = engine.run_all()

    diagnostics = None
    if report_diagnostics:
        report = engine.report()
        diagnostics = DiagnosticsResponse(
            **report.to_dict(),
            message=None if report.is_empty else report.render(),
        )

    return NormalizeResponse(
        data=_to_records(engine.df),
        summary=NormalizeSummary(**summary),
        diagnostics=diagnostics,
    )
