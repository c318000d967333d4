"""Audit log queries and rollback."""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from pydantic.alias_generators import to_camel
from sqlalchemy import Date, DateTime, Numeric, String, cast, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.errors import BadRequestError, NotFoundError
from offerdesk.models.audit import AuditLog
from offerdesk.services import audit_service as audit
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.stores import ROLLBACK_STORES

logger = logging.getLogger(__name__)

# Never replayed from a snapshot
_SKIP_ON_ROLLBACK = ("id", "created_at", "updated_at")


@dataclass
class AuditFilters:
    module: str | None = None
    action: str | None = None
    user: str | None = None
    entity_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    search: str | None = None
    limit: int = 100


def _restore_value(column, value):
    """Turn a JSON snapshot value back into what the column expects."""
    if value is None:
        return None
    if isinstance(column.type, DateTime):
        return datetime.fromisoformat(value)
    if isinstance(column.type, Date):
        return date.fromisoformat(value)
    if isinstance(column.type, Numeric):
        return Decimal(str(value))
    return value


class AuditLogService:
    async def list_logs(self, db: AsyncSession, filters: AuditFilters) -> list[AuditLog]:
        query = select(AuditLog)
        if filters.module:
            query = query.where(AuditLog.module == filters.module)
        if filters.action:
            query = query.where(AuditLog.action == filters.action)
        if filters.user:
            query = query.where(AuditLog.user == filters.user)
        if filters.entity_id:
            query = query.where(AuditLog.entity_id == filters.entity_id)
        if filters.start_date:
            start = datetime.combine(filters.start_date, time.min, tzinfo=timezone.utc)
            query = query.where(AuditLog.timestamp >= start)
        if filters.end_date:
            end = datetime.combine(filters.end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
            query = query.where(AuditLog.timestamp < end)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(
                    AuditLog.entity_id.ilike(pattern),
                    AuditLog.justification.ilike(pattern),
                    AuditLog.user.ilike(pattern),
                    cast(AuditLog.after_data, String).ilike(pattern),
                )
            )

        query = query.order_by(AuditLog.timestamp.desc(), AuditLog.created_at.desc()).limit(filters.limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, log_id: uuid.UUID) -> AuditLog:
        log = await db.get(AuditLog, log_id)
        if not log:
            raise NotFoundError("Audit log not found")
        return log

    async def rollback(
        self, db: AsyncSession, ctx: AuditContext, log_id: uuid.UUID, justification: str
    ):
        """Reapply a log's before-snapshot to its entity, audited as ROLLBACK."""
        log = await self.get(db, log_id)
        store = ROLLBACK_STORES.get(log.module)
        if store is None:
            raise BadRequestError(f"Rollback is not supported for module {log.module}")
        if not log.before_data:
            raise BadRequestError("Audit log has no before snapshot to restore")

        columns = store.model.__table__.c
        changes = {}
        for column in columns:
            if column.key in _SKIP_ON_ROLLBACK:
                continue
            key = to_camel(column.key)
            if key in log.before_data:
                changes[column.key] = _restore_value(column, log.before_data[key])

        entity = await store.update(
            db, ctx, uuid.UUID(log.entity_id), changes,
            action=audit.ROLLBACK, justification=justification,
        )
        logger.info(f"Rolled back {log.module} {log.entity_id} to audit log {log_id} by {ctx.user}")
        return entity


audit_log_service = AuditLogService()
