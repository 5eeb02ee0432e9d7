"""API routes."""

from fastapi import APIRouter

from app.routes import admin, orders, users, variants

api_router = APIRouter()

# Catalog reads (listing, option sets, combinations)
api_router.include_router(variants.router, prefix="/v1/variants", tags=["variants"])

# Orders and users
api_router.include_router(orders.router, prefix="/v1/orders", tags=["orders"])
api_router.include_router(users.router, prefix="/v1/users", tags=["users"])

# Admin endpoints (bulk import, variant management)
api_router.include_router(admin.router, prefix="/v1/admin", tags=["admin"])
