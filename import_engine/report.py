"""
import_engine.report - Records produced and consumed by an import run.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Protocol

# One spreadsheet line: header -> cell value (str | int | float | bool | None)
RawRow = Mapping[str, Any]


def freeze_row(values: dict[str, Any]) -> RawRow:
    """Wrap a parsed row so nothing downstream can mutate it."""
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class HealthcareCenterRef:
    id: str
    name: str
    state: str = ""
    lga: str = ""


@dataclass(frozen=True)
class CanonicalReport:
    center_id: str
    center_name: str
    report_month: str            # YYYY-MM-01
    in_stock: bool
    stock_beginning: int
    stock_end: int
    shortage: bool
    shortage_response: str | None
    outreach: bool
    fixed_doses: int
    outreach_doses: int
    total_doses: int
    misinformation: str | None
    dhis_check: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RowError:
    row: int        # 1-based data row index
    message: str

    def to_dict(self) -> dict:
        return {"row": self.row, "message": self.message}


@dataclass
class ImportResult:
    processed_reports: list[CanonicalReport] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    unmatched_centers: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when nothing blocks committing the processed reports."""
        return not self.errors and not self.unmatched_centers

    def to_dict(self) -> dict:
        return {
            "processed_count": len(self.processed_reports),
            "processed_reports": [r.to_dict() for r in self.processed_reports],
            "errors": [e.to_dict() for e in self.errors],
            "unmatched_centers": list(self.unmatched_centers),
        }


@dataclass
class PersistResult:
    success: bool = True
    saved_count: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "saved_count": self.saved_count,
            "errors": list(self.errors),
        }


@dataclass
class ImportOutcome:
    """What run_import hands back: the validation result and, if committed, the save result."""
    result: ImportResult
    persisted: PersistResult | None = None

    def to_dict(self) -> dict:
        d = self.result.to_dict()
        d["persisted"] = self.persisted.to_dict() if self.persisted else None
        return d


# ── Store contracts ──────────────────────────────────────────────────

class CenterStore(Protocol):
    def list_centers(self) -> list[HealthcareCenterRef]: ...


class ReportStore(Protocol):
    def upsert_reports(self, records: list[dict]) -> None:
        """Insert or update on (center_id, report_month).  Raises StoreError."""
        ...
