# File: app/api/v1/api.py
from fastapi import APIRouter
from app.api.v1.endpoints import (
    admin, certificates, contact, entrepreneurs, events, forms, gallery, profile, stalls,
)

# Create main API router
api_router = APIRouter()

api_router.include_router(
    events.router,
    prefix="/events",
    tags=["events"]
)

api_router.include_router(
    stalls.router,
    prefix="/stalls",
    tags=["stalls"]
)

api_router.include_router(
    certificates.router,
    prefix="/certificates",
    tags=["certificates"]
)

api_router.include_router(
    profile.router,
    prefix="/profile",
    tags=["profile-management"]
)

api_router.include_router(
    forms.router,
    prefix="/forms",
    tags=["forms"]
)

api_router.include_router(
    contact.router,
    prefix="/contact",
    tags=["contact"]
)

api_router.include_router(
    gallery.router,
    prefix="/gallery",
    tags=["gallery"]
)

api_router.include_router(
    entrepreneurs.router,
    prefix="/entrepreneurs",
    tags=["entrepreneurs"]
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"]
)
