from __future__ import annotations

import asyncio
import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import yaml
from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validate

from ..domain.models import (
    BulkDiscountRule,
    ClientTierAssignment,
    PartPriceEntry,
    PricingTier,
    SeasonalPricingWindow,
    ServicePriceEntry,
)
from ..errors import InvalidPricingInput, RuleTableError

T = TypeVar("T")

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "rule_tables.schema.json"


def _to_date(v: Any, *, field_name: str) -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        try:
            return date.fromisoformat(v.strip())
        except ValueError:
            pass
    raise InvalidPricingInput(field_name, f"expected ISO date (YYYY-MM-DD), got {v!r}")


def _opt(v: Any) -> Optional[str]:
    return None if v is None else str(v)


# -----------------------------
# Row -> domain
# -----------------------------


def bulk_rule_from_row(r: Dict[str, Any]) -> BulkDiscountRule:
    return BulkDiscountRule(
        id=str(r["id"]),
        description=str(r.get("description") or ""),
        applies_to=r["applies_to"],
        minimum_quantity=r["minimum_quantity"],
        discount_type=r["discount_type"],
        discount_percentage=str(r.get("discount_percentage", "0")),
        discount_value=str(r.get("discount_value", "0")),
        is_active=bool(r.get("is_active", True)),
    )


def tier_from_row(r: Dict[str, Any]) -> PricingTier:
    return PricingTier(
        id=str(r["id"]),
        name=str(r["name"]),
        discount_percentage=str(r["discount_percentage"]),
        minimum_job_value=_opt(r.get("minimum_job_value")),
        is_active=bool(r.get("is_active", True)),
    )


def assignment_from_row(r: Dict[str, Any]) -> ClientTierAssignment:
    return ClientTierAssignment(client_id=str(r["client_id"]), tier_id=str(r["tier_id"]))


def seasonal_from_row(r: Dict[str, Any]) -> SeasonalPricingWindow:
    return SeasonalPricingWindow(
        id=str(r["id"]),
        name=str(r["name"]),
        start_date=_to_date(r["start_date"], field_name="start_date"),
        end_date=_to_date(r["end_date"], field_name="end_date"),
        adjustment_type=r["adjustment_type"],
        adjustment_value=str(r["adjustment_value"]),
        applies_to=r.get("applies_to", "all_services"),
        service_ids=tuple(str(x) for x in (r.get("service_ids") or [])),
        is_active=bool(r.get("is_active", True)),
    )


def service_from_row(r: Dict[str, Any]) -> ServicePriceEntry:
    return ServicePriceEntry(
        id=str(r["id"]),
        name=str(r["name"]),
        category=r["category"],
        base_price=str(r["base_price"]),
        cost_price=str(r["cost_price"]),
        is_active=bool(r.get("is_active", True)),
        estimated_duration_minutes=int(r.get("estimated_duration_minutes", 0)),
    )


def part_from_row(r: Dict[str, Any]) -> PartPriceEntry:
    return PartPriceEntry(
        id=str(r["id"]),
        name=str(r["name"]),
        sell_price=str(r["sell_price"]),
        cost_price=str(r["cost_price"]),
        is_active=bool(r.get("is_active", True)),
    )


class YamlRuleRepository:
    """
    RuleRepository backed by one YAML file.

    - The file is re-read (and schema-validated) on every call; no cache.
    - Reads run in a worker thread so concurrent fetches don't block the loop.
    - Any parse/validation problem raises RuleTableError naming the table.
    """

    def __init__(self, path: str | Path, schema_path: Path = SCHEMA_PATH):
        self.path = Path(path)
        self.schema_path = schema_path

    # -----------------
    # internals
    # -----------------

    def _read(self) -> Dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except OSError as e:
            raise RuleTableError(f"{self.path}: cannot read rule tables: {e}") from e
        except yaml.YAMLError as e:
            raise RuleTableError(f"{self.path}: invalid YAML: {e}") from e

        with self.schema_path.open("r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            validate(instance=raw, schema=schema)
        except SchemaValidationError as e:
            where = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise RuleTableError(f"{self.path}: schema violation at {where}: {e.message}") from e

        return raw

    async def _rows(self, table: str) -> List[Dict[str, Any]]:
        raw = await asyncio.to_thread(self._read)
        return list(raw.get(table) or [])

    @staticmethod
    def _parse(table: str, rows: List[Dict[str, Any]], fn: Callable[[Dict[str, Any]], T]) -> List[T]:
        out: List[T] = []
        for idx, row in enumerate(rows):
            try:
                out.append(fn(row))
            except InvalidPricingInput as e:
                raise RuleTableError(f"{table}[{idx}] ({row.get('id', '?')}): {e}") from e
        return out

    # -----------------
    # RuleRepository
    # -----------------

    async def get_active_bulk_rules(self) -> Sequence[BulkDiscountRule]:
        rules = self._parse("bulk_rules", await self._rows("bulk_rules"), bulk_rule_from_row)
        return [r for r in rules if r.is_active]

    async def get_tier_assignment(self, client_id: str) -> Optional[ClientTierAssignment]:
        rows = await self._rows("client_tiers")
        for a in self._parse("client_tiers", rows, assignment_from_row):
            if a.client_id == client_id:
                return a
        return None

    async def get_tier(self, tier_id: str) -> Optional[PricingTier]:
        for t in self._parse("tiers", await self._rows("tiers"), tier_from_row):
            if t.id == tier_id:
                return t
        return None

    async def get_active_seasonal_windows(self) -> Sequence[SeasonalPricingWindow]:
        windows = self._parse("seasonal_pricing", await self._rows("seasonal_pricing"), seasonal_from_row)
        return [w for w in windows if w.is_active]

    async def get_services(self, ids: Sequence[str]) -> Sequence[ServicePriceEntry]:
        by_id = {s.id: s for s in self._parse("services", await self._rows("services"), service_from_row)}
        return [by_id[i] for i in ids if i in by_id]

    async def get_parts(self, ids: Sequence[str]) -> Sequence[PartPriceEntry]:
        by_id = {p.id: p for p in self._parse("parts", await self._rows("parts"), part_from_row)}
        return [by_id[i] for i in ids if i in by_id]
