from fastapi import Request

from offerdesk.services.audit_service import AuditContext


def get_request_context(request: Request) -> AuditContext:
    """Actor and client metadata for audit rows.

    The acting user comes from the x-user header; there is no session layer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None

    return AuditContext(
        user=request.headers.get("x-user") or "system",
        ip_address=ip_address,
        user_agent=request.headers.get("user-agent"),
        session_id=request.headers.get("x-session-id"),
    )
