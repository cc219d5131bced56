"""Router registrations."""

from fastapi import APIRouter

from app.api.routers import agreements, health, offers, properties, users


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router, tags=["health"])
    router.include_router(offers.router, prefix="/api/v1/offers", tags=["offers"])
    router.include_router(agreements.router, prefix="/api/v1/agreements", tags=["agreements"])
    router.include_router(properties.router, prefix="/api/v1/properties", tags=["properties"])
    router.include_router(users.router, prefix="/api/v1/users", tags=["users"])
    return router
