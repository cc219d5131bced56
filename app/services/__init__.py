"""Business logic service layer."""

from app.services.agreements import AgreementFinalizer, AgreementService  # noqa: F401
from app.services.availability import PropertyAvailabilityGate  # noqa: F401
from app.services.offers import OfferService  # noqa: F401
from app.services.users import UserService  # noqa: F401
