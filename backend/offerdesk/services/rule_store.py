"""Rule store — conflict-checked, audited CRUD shared by every admin entity."""

import logging
import uuid
from collections.abc import Awaitable, Callable
from types import SimpleNamespace
from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.errors import BadRequestError, ConflictError, NotFoundError
from offerdesk.services import audit_service as audit
from offerdesk.services.audit_service import AuditContext, audit_recorder, snapshot
from offerdesk.services.conflict_checker import find_code_conflicts
from offerdesk.services.rule_matcher import RuleContext, match_rules

logger = logging.getLogger(__name__)

ConflictFinder = Callable[[AsyncSession, Any, uuid.UUID | None], Awaitable[list]]

# (start, end) column pairs that must not be inverted
WINDOW_COLUMNS = (
    ("booking_start_date", "booking_end_date"),
    ("travel_start_date", "travel_end_date"),
    ("valid_from", "valid_to"),
)


def check_windows(values) -> None:
    """Reject any start/end pair whose end precedes its start."""
    for start_field, end_field in WINDOW_COLUMNS:
        start = getattr(values, start_field, None)
        end = getattr(values, end_field, None)
        if start is not None and end is not None and end < start:
            raise BadRequestError(
                f"{to_camel(end_field)} must be on or after {to_camel(start_field)}"
            )


class RuleStore:
    """CRUD over one model.

    Writes are conflict-checked only when the resulting row is ACTIVE. Code
    uniqueness falls back on the partial unique index: an IntegrityError at
    flush becomes a 409 listing the rows that now hold the code.
    """

    def __init__(
        self,
        model,
        module: str,
        label: str,
        *,
        code_field: str | None = None,
        statuses: tuple[str, ...] = ("ACTIVE", "INACTIVE"),
        conflict_finder: ConflictFinder | None = None,
    ):
        self.model = model
        self.module = module
        self.label = label
        self.code_field = code_field
        self.statuses = statuses
        self.conflict_finder = conflict_finder

    async def list(self, db: AsyncSession, context: RuleContext) -> list:
        return await match_rules(db, self.model, context)

    async def get(self, db: AsyncSession, entity_id: uuid.UUID):
        entity = await db.get(self.model, entity_id)
        if entity is None:
            raise NotFoundError(f"{self.label} not found")
        return entity

    async def get_by_code(self, db: AsyncSession, code: str, active_only: bool = True):
        column = getattr(self.model, self.code_field)
        query = select(self.model).where(column == code)
        if active_only:
            query = query.where(self.model.status == "ACTIVE")
        result = await db.execute(query.order_by(self.model.created_at.desc()).limit(1))
        entity = result.scalar_one_or_none()
        if entity is None:
            raise NotFoundError(f"{self.label} {code} not found")
        return entity

    async def find_conflicts(self, db: AsyncSession, candidate, exclude_id: uuid.UUID | None = None) -> list:
        if candidate.status != "ACTIVE":
            return []
        if self.conflict_finder is not None:
            return await self.conflict_finder(db, candidate, exclude_id)
        if self.code_field is not None:
            code = getattr(candidate, self.code_field)
            return await find_code_conflicts(db, self.model, self.code_field, code, exclude_id)
        return []

    async def _check(self, db: AsyncSession, candidate, exclude_id: uuid.UUID | None = None) -> None:
        conflicts = await self.find_conflicts(db, candidate, exclude_id)
        if conflicts:
            raise ConflictError(
                f"{self.label} conflicts with existing active records",
                [snapshot(c) for c in conflicts],
            )

    async def _flush(self, db: AsyncSession, entity) -> None:
        code = getattr(entity, self.code_field) if self.code_field else None
        try:
            await db.flush()
        except IntegrityError as exc:
            await db.rollback()
            conflicts = []
            if code is not None:
                conflicts = await find_code_conflicts(db, self.model, self.code_field, code)
            raise ConflictError(
                f"{self.label} conflicts with existing active records",
                [snapshot(c) for c in conflicts],
            ) from exc
        await db.refresh(entity)

    def _merged(self, entity, changes: dict) -> SimpleNamespace:
        values = {attr.key: getattr(entity, attr.key) for attr in inspect(entity).mapper.column_attrs}
        values.update(changes)
        return SimpleNamespace(**values)

    async def create(self, db: AsyncSession, ctx: AuditContext, data: dict, action: str = audit.CREATED):
        entity = self.model(**data)

        async def mutation():
            await self._check(db, entity)
            db.add(entity)
            await self._flush(db, entity)
            return entity

        return await audit_recorder.audited(db, ctx, self.module, action, mutation)

    async def update(
        self,
        db: AsyncSession,
        ctx: AuditContext,
        entity_id: uuid.UUID,
        changes: dict,
        *,
        action: str = audit.UPDATED,
        justification: str | None = None,
    ):
        entity = await self.get(db, entity_id)
        columns = self.model.__table__.c
        changes = {k: v for k, v in changes.items() if v is not None or columns[k].nullable}
        if "status" in changes and changes["status"] not in self.statuses:
            raise BadRequestError(
                f"Invalid status. Must be one of: {', '.join(self.statuses)}"
            )
        check_windows(self._merged(entity, changes))

        async def before():
            return snapshot(entity)

        async def mutation():
            await self._check(db, self._merged(entity, changes), exclude_id=entity.id)
            for key, value in changes.items():
                setattr(entity, key, value)
            await self._flush(db, entity)
            return entity

        return await audit_recorder.audited(
            db, ctx, self.module, action, mutation, before=before, justification=justification
        )

    async def set_status(self, db: AsyncSession, ctx: AuditContext, entity_id: uuid.UUID, status: str, **extra):
        return await self.update(
            db, ctx, entity_id, {"status": status, **extra}, action=audit.STATUS_CHANGED
        )

    async def delete(self, db: AsyncSession, ctx: AuditContext, entity_id: uuid.UUID) -> None:
        entity = await self.get(db, entity_id)

        async def before():
            return snapshot(entity)

        async def mutation():
            await db.delete(entity)
            await db.flush()
            return None

        await audit_recorder.audited(
            db, ctx, self.module, audit.DELETED, mutation, before=before, entity_id=str(entity_id)
        )
        logger.info(f"{self.label} {entity_id} deleted by {ctx.user}")
