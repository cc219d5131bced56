"""SQLAlchemy ORM models for the rental notary service."""

from app.models.base import Base  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401
from app.models.property import Property  # noqa: F401
from app.models.offer import Offer, OfferAction, OfferStatus  # noqa: F401
from app.models.agreement import Agreement, AgreementStatus  # noqa: F401
from app.models.reconciliation import AgreementReconciliation  # noqa: F401
