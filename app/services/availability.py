"""Property availability gate: at most one active agreement per property."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.models.property import Property
from app.services.errors import ConflictError, UnavailableError

logger = logging.getLogger("app.services.availability")


class PropertyAvailabilityGate:
    """Guards the ``is_available`` flag; re-listing lives with the catalogue service."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def ensure_available(self, property_entity: Property) -> None:
        if not property_entity.is_available:
            raise UnavailableError(f"Property {property_entity.id} is not available")

    def mark_leased(self, property_id: UUID) -> None:
        """Flip the flag to false; fails if another agreement already claimed the property."""

        result = self._session.execute(
            update(Property)
            .where(Property.id == property_id, Property.is_available.is_(True))
            .values(is_available=False)
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount == 0:
            raise ConflictError(f"Property {property_id} is already leased")
        logger.info("property_marked_unavailable", extra={"property_id": str(property_id)})
