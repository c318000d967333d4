"""Audit recorder — wraps mutations and writes one AuditLog row per change."""

import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.models.audit import AuditLog

logger = logging.getLogger(__name__)

# Modules
NEGOTIATED_FARE = "NEGOTIATED_FARE"
DYNAMIC_DISCOUNT_RULE = "DYNAMIC_DISCOUNT_RULE"
AIR_ANCILLARY_RULE = "AIR_ANCILLARY_RULE"
NONAIR_RATE = "NONAIR_RATE"
NONAIR_RULE = "NONAIR_RULE"
BUNDLE = "BUNDLE"
BUNDLE_PRICING_RULE = "BUNDLE_PRICING_RULE"
OFFER_RULE = "OFFER_RULE"
CHANNEL_OVERRIDE = "CHANNEL_OVERRIDE"
AGENT = "AGENT"
AGENT_TIER = "AGENT_TIER"
AGENT_TIER_ASSIGNMENT = "AGENT_TIER_ASSIGNMENT"
COHORT = "COHORT"
CAMPAIGN = "CAMPAIGN"

# Actions
CREATED = "CREATED"
UPDATED = "UPDATED"
STATUS_CHANGED = "STATUS_CHANGED"
DELETED = "DELETED"
ROLLBACK = "ROLLBACK"
MANUAL_OVERRIDE = "MANUAL_OVERRIDE"
AUTO_ASSIGNED = "AUTO_ASSIGNED"
UPLOADED = "UPLOADED"


@dataclass
class AuditContext:
    """Who made the request, and from where."""

    user: str = "system"
    ip_address: str | None = None
    user_agent: str | None = None
    session_id: str | None = None


def _json_value(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


def snapshot(entity) -> dict:
    """JSON-safe, camelCase dict of an entity's column values."""
    mapper = inspect(entity).mapper
    return {
        to_camel(attr.key): _json_value(getattr(entity, attr.key))
        for attr in mapper.column_attrs
    }


def diff(before: dict | None, after: dict | None) -> dict:
    """Field-level changes between two snapshots: {field: {from, to}}."""
    before = before or {}
    after = after or {}
    changes = {}
    for key in sorted(set(before) | set(after)):
        if key in ("updatedAt", "createdAt"):
            continue
        if before.get(key) != after.get(key):
            changes[key] = {"from": before.get(key), "to": after.get(key)}
    return changes


class AuditRecorder:
    """Writes AuditLog rows inside the caller's transaction."""

    def record(
        self,
        db: AsyncSession,
        ctx: AuditContext,
        module: str,
        entity_id: str,
        action: str,
        before: dict | None = None,
        after: dict | None = None,
        justification: str | None = None,
    ) -> AuditLog:
        log = AuditLog(
            user=ctx.user,
            module=module,
            entity_id=str(entity_id),
            action=action,
            before_data=before,
            after_data=after,
            diff=diff(before, after) if before is not None and after is not None else None,
            justification=justification,
            ip_address=ctx.ip_address,
            user_agent=ctx.user_agent,
            session_id=ctx.session_id,
        )
        db.add(log)
        return log

    async def audited(
        self,
        db: AsyncSession,
        ctx: AuditContext,
        module: str,
        action: str,
        mutation: Callable[[], Awaitable[Any]],
        *,
        before: Callable[[], Awaitable[dict | None]] | None = None,
        entity_id: str | None = None,
        justification: str | None = None,
    ):
        """Run a mutation and its audit row as one commit.

        ``before`` is awaited ahead of the mutation to capture the prior
        snapshot. The mutation's return value (an entity, or None for
        deletes) becomes the after snapshot.
        """
        before_data = await before() if before else None
        result = await mutation()
        after_data = snapshot(result) if result is not None else None
        if entity_id is None:
            entity_id = str(result.id)

        self.record(db, ctx, module, entity_id, action, before_data, after_data, justification)
        await db.commit()
        logger.info(f"Audit {module} {action} {entity_id} by {ctx.user}")
        return result


audit_recorder = AuditRecorder()
