"""Negotiated fare router — CRUD plus CSV upload."""

import uuid

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from offerdesk.database import get_db
from offerdesk.dependencies import get_request_context
from offerdesk.errors import BadRequestError
from offerdesk.schemas.common import StatusUpdate
from offerdesk.schemas.fares import (
    NegotiatedFareCreate,
    NegotiatedFareResponse,
    NegotiatedFareUpdate,
)
from offerdesk.services.audit_service import AuditContext
from offerdesk.services.rule_matcher import RuleContext
from offerdesk.services.stores import fare_store
from offerdesk.services.upload_service import FARES, upload_service

router = APIRouter()


@router.get("", response_model=list[NegotiatedFareResponse])
async def list_fares(
    airline_code: str | None = Query(None, alias="airlineCode"),
    origin: str | None = None,
    destination: str | None = None,
    cabin_class: str | None = Query(None, alias="cabinClass"),
    trip_type: str | None = Query(None, alias="tripType"),
    status: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    context = RuleContext(
        origin=origin,
        destination=destination,
        cabin_class=cabin_class,
        trip_type=trip_type,
        status=status,
        filters={"airline_code": airline_code},
    )
    return await fare_store.list(db, context)


@router.post("/upload")
async def upload_fares(
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    """Bulk insert fares from a CSV file."""
    if file is None:
        raise BadRequestError("No file uploaded")
    content = await file.read()
    return await upload_service.upload(db, ctx, FARES, content)


@router.get("/{fare_id}", response_model=NegotiatedFareResponse)
async def get_fare(fare_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await fare_store.get(db, fare_id)


@router.post("", response_model=NegotiatedFareResponse, status_code=201)
async def create_fare(
    req: NegotiatedFareCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    """Create a fare. 409 when it overlaps an active fare on the same route and cabin."""
    return await fare_store.create(db, ctx, req.to_columns())


@router.put("/{fare_id}", response_model=NegotiatedFareResponse)
async def update_fare(
    fare_id: uuid.UUID,
    req: NegotiatedFareUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await fare_store.update(db, ctx, fare_id, req.to_columns(exclude_unset=True))


@router.patch("/{fare_id}/status", response_model=NegotiatedFareResponse)
async def update_fare_status(
    fare_id: uuid.UUID,
    req: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    return await fare_store.set_status(db, ctx, fare_id, req.status)


@router.delete("/{fare_id}", status_code=204)
async def delete_fare(
    fare_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    ctx: AuditContext = Depends(get_request_context),
):
    await fare_store.delete(db, ctx, fare_id)
