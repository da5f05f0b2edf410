"""API routers for the station administration backend."""
from fastapi import APIRouter

from . import activity_log, backup, blacklist, discipline, health, inventory, leaves, notifications, users, withdraw_items


def get_api_router() -> APIRouter:
    """Return the root API router."""

    api_router = APIRouter()
    api_router.include_router(health.router)
    api_router.include_router(users.router)
    api_router.include_router(activity_log.router)
    api_router.include_router(backup.router)
    api_router.include_router(inventory.router)
    api_router.include_router(withdraw_items.router)
    api_router.include_router(leaves.router)
    api_router.include_router(blacklist.router)
    api_router.include_router(discipline.router)
    api_router.include_router(notifications.router)
    return api_router
