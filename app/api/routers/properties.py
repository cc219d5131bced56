"""Read-only property endpoints; listing management lives in the catalogue service."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_db_session
from app.models.property import Property
from app.schemas.property import PropertyResponse
from app.services.errors import NotFoundError

router = APIRouter()


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
)
def get_property(
    property_id: UUID,
    session: Session = Depends(get_db_session),
) -> PropertyResponse:
    """Get property details, including whether it is still open for offers."""
    property_entity = session.get(Property, property_id)
    if not property_entity:
        raise NotFoundError(f"Property {property_id} not found")
    return PropertyResponse.model_validate(property_entity, from_attributes=True)
