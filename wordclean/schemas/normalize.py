from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class NormalizeRequest(BaseModel):
    data: list[dict[str, Any]]
    # Either one wordlist (list of rows) or {column_name: rows}
    wordlists: Union[list[dict[str, Any]], dict[str, list[dict[str, Any]]]]
    group_ref: Optional[Union[int, str]] = None
    use_group: bool = True
    sort_by: Optional[str] = None
    categorical: list[str] = Field(default_factory=list)
    report_diagnostics: Optional[bool] = None


class NormalizeSummary(BaseModel):
    mode: str
    columns_processed: int
    columns_changed: list[str]
    total_changes: int
    warnings: int
    errors: int


class DiagnosticsResponse(BaseModel):
    warnings: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    errors: dict[str, list[str]] = Field(default_factory=dict)
    n_warnings: int = 0
    n_errors: int = 0
    message: Optional[str] = None


class NormalizeResponse(BaseModel):
    data: list[dict[str, Any]]
    summary: NormalizeSummary
    diagnostics: Optional[DiagnosticsResponse] = None
