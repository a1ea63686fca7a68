"""Google Sheets public gviz export client."""

import json
import re
from dataclasses import dataclass
from typing import Protocol

import httpx

Cell = str | float | int
SheetRows = list[list[Cell]]

_GVIZ_WRAPPER = re.compile(
    r"google\.visualization\.Query\.setResponse\(([\s\S]*)\);?\s*$"
)


class SheetParseError(RuntimeError):
    """Raised when a gviz response cannot be understood."""


class SheetsClient(Protocol):
    """Interface for reading a sheet as header + data rows."""

    async def fetch_sheet(self, sheet_name: str) -> SheetRows:
        """Return ``[header, *rows]`` for a sheet."""


@dataclass
class HttpxSheetsClient(SheetsClient):
    """HTTPX-backed client for the public gviz JSON export."""

    sheet_id: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, sheet_id: str, base_url: str, timeout: float = 15
    ) -> "HttpxSheetsClient":
        """Create a sheets client with a managed httpx session."""
        return cls(
            sheet_id=sheet_id,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def fetch_sheet(self, sheet_name: str) -> SheetRows:
        """Fetch a sheet by name and parse the gviz payload."""
        url = f"{self.base_url}/{self.sheet_id}/gviz/tq"
        response = await self.http_client.get(
            url,
            params={"tqx": "out:json", "sheet": sheet_name},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return parse_gviz_response(response.text)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def parse_gviz_response(text: str) -> SheetRows:
    """Extract ``[labels, *rows]`` from a gviz ``setResponse(...)`` body.

    Null cells become empty strings.
    """
    match = _GVIZ_WRAPPER.search(text)
    if not match:
        raise SheetParseError("Response is not a gviz setResponse payload")
    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as exc:
        raise SheetParseError("gviz payload is not valid JSON") from exc
    _require_object(payload, "payload")

    if payload.get("status") == "error":
        errors = payload.get("errors")
        first = errors[0] if isinstance(errors, list) and errors else {}
        _require_object(first, "error")
        reason = first.get("detailed_message") or first.get("message")
        raise SheetParseError(f"gviz query failed: {reason or 'unknown error'}")

    table = payload.get("table") or {}
    _require_object(table, "table")
    raw_rows = table.get("rows")
    if not raw_rows:
        return []
    raw_cols = table.get("cols") or []
    if not isinstance(raw_rows, list) or not isinstance(raw_cols, list):
        raise SheetParseError("gviz table rows and cols must be lists")
    labels: list[Cell] = []
    for col in raw_cols:
        _require_object(col, "column")
        labels.append(col.get("label") or "")
    rows: SheetRows = []
    for row in raw_rows:
        _require_object(row, "row")
        cells = row.get("c") or []
        if not isinstance(cells, list):
            raise SheetParseError("gviz row cells must be a list")
        rows.append([_cell_value(cell) for cell in cells])
    return [labels, *rows]


def _require_object(value: object, what: str) -> None:
    if not isinstance(value, dict):
        raise SheetParseError(f"gviz {what} is not a JSON object")


def _cell_value(cell: object) -> Cell:
    if not cell:
        return ""
    if not isinstance(cell, dict):
        raise SheetParseError("gviz cell is not a JSON object")
    value = cell.get("v")
    if value is None:
        return ""
    return value  # type: ignore[return-value]
