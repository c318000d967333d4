import uuid
from datetime import datetime

from pydantic import Field

from offerdesk.schemas.common import CamelModel


class AuditLogResponse(CamelModel):
    id: uuid.UUID
    timestamp: datetime | None
    user: str
    module: str
    entity_id: str
    action: str
    before_data: dict | None
    after_data: dict | None
    diff: dict | None
    justification: str | None
    ip_address: str | None
    user_agent: str | None
    session_id: str | None


class RollbackRequest(CamelModel):
    justification: str = Field(min_length=1)
