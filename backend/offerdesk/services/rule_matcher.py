"""Rule filter/matcher — selects stored rules applicable to a request context."""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

SCOPE_FIELDS = ("origin", "destination", "cabin_class", "trip_type", "channel", "status")

# Targeting arrays: context field -> candidate column names on a rule model
TARGETING_FIELDS = {
    "agent_tier": ("agent_tier", "eligible_agent_tiers"),
    "pos": ("pos",),
}


@dataclass
class RuleContext:
    origin: str | None = None
    destination: str | None = None
    cabin_class: str | None = None
    trip_type: str | None = None
    channel: str | None = None
    status: str | None = "ACTIVE"
    agent_tier: str | None = None
    pos: str | None = None
    # Extra exact-match columns, e.g. {"ancillary_code": "BAG20"}
    filters: dict[str, Any] = field(default_factory=dict)


def _targeting_column(model, context_field: str) -> str | None:
    for column in TARGETING_FIELDS[context_field]:
        if hasattr(model, column):
            return column
    return None


async def match_rules(
    db: AsyncSession, model, context: RuleContext, order_by_priority: bool = True
) -> list:
    """Rules whose scope fields equal every provided context value.

    Dimensions missing from the context, or absent on the model, are not
    filtered. Targeting arrays must contain the caller's value when given.
    Validity windows are not checked against today.
    """
    query = select(model)

    scalars = {name: getattr(context, name) for name in SCOPE_FIELDS}
    scalars.update(context.filters)
    for name, value in scalars.items():
        if value is None or not hasattr(model, name):
            continue
        query = query.where(getattr(model, name) == value)

    if order_by_priority and hasattr(model, "priority"):
        query = query.order_by(model.priority.asc(), model.created_at.asc())
    else:
        query = query.order_by(model.created_at.asc())

    result = await db.execute(query)
    rules = list(result.scalars().all())

    for context_field in TARGETING_FIELDS:
        wanted = getattr(context, context_field)
        column = _targeting_column(model, context_field)
        if wanted is None or column is None:
            continue
        rules = [r for r in rules if wanted in (getattr(r, column) or [])]

    return rules
