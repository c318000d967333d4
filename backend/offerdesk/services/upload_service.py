"""CSV bulk upload for negotiated fares and non-air rates.

Every row is validated and conflict-checked before anything is written; the
accepted rows then go in as one transaction.
"""

import csv
import io
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.errors import BadRequestError
from offerdesk.exception_handlers import validation_errors
from offerdesk.schemas.common import CamelModel
from offerdesk.schemas.fares import NegotiatedFareCreate
from offerdesk.schemas.nonair import NonAirRateCreate
from offerdesk.services import audit_service as audit
from offerdesk.services.audit_service import AuditContext, audit_recorder, snapshot
from offerdesk.services.conflict_checker import (
    fares_overlap,
    find_fare_conflicts,
    find_rate_conflicts,
    rates_overlap,
)
from offerdesk.services.rule_store import RuleStore
from offerdesk.services.stores import fare_store, rate_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadKind:
    store: RuleStore
    schema: type[CamelModel]
    array_columns: tuple[str, ...]
    defaults: dict
    overlaps: Callable[[object, object], bool]
    find_conflicts: Callable[[AsyncSession, object], Awaitable[list]]


FARES = UploadKind(
    store=fare_store,
    schema=NegotiatedFareCreate,
    array_columns=("pos", "blackoutDates", "eligibleAgentTiers", "eligibleCohorts"),
    defaults={"eligibleAgentTiers": ["BRONZE"]},
    overlaps=fares_overlap,
    find_conflicts=find_fare_conflicts,
)

RATES = UploadKind(
    store=rate_store,
    schema=NonAirRateCreate,
    array_columns=("region",),
    defaults={},
    overlaps=rates_overlap,
    find_conflicts=find_rate_conflicts,
)


def parse_array(value: str) -> list[str]:
    """JSON array, or a pipe-separated list."""
    value = value.strip()
    if value.startswith("["):
        parsed = json.loads(value)
        if not isinstance(parsed, list):
            raise ValueError("expected a JSON array")
        return parsed
    return [part.strip() for part in value.split("|") if part.strip()]


def read_rows(content: bytes) -> list[dict]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise BadRequestError("File must be UTF-8 encoded CSV")
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise BadRequestError("CSV file has no header row")
    return [{k.strip(): (v or "").strip() for k, v in row.items() if k} for row in reader]


class UploadService:
    def _prepare(self, kind: UploadKind, raw: dict) -> dict:
        data = {k: v for k, v in raw.items() if v != ""}
        for column in kind.array_columns:
            if column in data:
                data[column] = parse_array(data[column])
        for column, default in kind.defaults.items():
            data.setdefault(column, default)
        return data

    async def upload(self, db: AsyncSession, ctx: AuditContext, kind: UploadKind, content: bytes) -> dict:
        rows = read_rows(content)
        errors = []
        conflicts = []
        accepted = []  # (row number, raw row, entity)

        for index, raw in enumerate(rows, start=1):
            try:
                parsed = kind.schema.model_validate(self._prepare(kind, raw))
            except ValidationError as exc:
                messages = [f"{e['field']}: {e['message']}" for e in validation_errors(exc.errors())]
                errors.append({"row": index, "data": raw, "error": "; ".join(messages)})
                continue
            except ValueError as exc:
                errors.append({"row": index, "data": raw, "error": str(exc)})
                continue

            entity = kind.store.model(**parsed.to_columns())
            if entity.status != "ACTIVE":
                accepted.append((index, raw, entity))
                continue

            clashes = [snapshot(c) for c in await kind.find_conflicts(db, entity)]
            clashes += [
                {"row": earlier_index, **earlier_raw}
                for earlier_index, earlier_raw, earlier in accepted
                if earlier.status == "ACTIVE" and kind.overlaps(entity, earlier)
            ]
            if clashes:
                conflicts.append({"row": index, "data": raw, "conflicts": clashes})
                continue
            accepted.append((index, raw, entity))

        inserted = []
        if accepted:
            entities = [entity for _, _, entity in accepted]
            db.add_all(entities)
            await db.flush()
            for entity in entities:
                await db.refresh(entity)
                after = snapshot(entity)
                audit_recorder.record(db, ctx, kind.store.module, str(entity.id), audit.UPLOADED, None, after)
                inserted.append(after)
            await db.commit()

        logger.info(
            f"{kind.store.label} upload by {ctx.user}: {len(inserted)} inserted, "
            f"{len(conflicts)} conflicts, {len(errors)} errors"
        )
        return {
            "success": True,
            "inserted": len(inserted),
            "conflicts": len(conflicts),
            "errors": len(errors),
            "data": {"inserted": inserted, "conflicts": conflicts, "errors": errors},
        }


upload_service = UploadService()
