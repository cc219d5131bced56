"""Pydantic schemas for API payloads."""

from app.schemas.agreement import AgreementFinalize, AgreementResponse, AgreementVerification
from app.schemas.notarization import NotarizationDocument
from app.schemas.offer import OfferCreate, OfferResponse, OfferTransition
from app.schemas.property import PropertyResponse
from app.schemas.user import UserResponse, WalletLink

__all__ = [
    "AgreementFinalize",
    "AgreementResponse",
    "AgreementVerification",
    "NotarizationDocument",
    "OfferCreate",
    "OfferResponse",
    "OfferTransition",
    "PropertyResponse",
    "UserResponse",
    "WalletLink",
]
