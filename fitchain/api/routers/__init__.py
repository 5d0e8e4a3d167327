"""Aggregate API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .food import router as food_router
from .leaderboard import router as leaderboard_router
from .payments import router as payments_router
from .system import router as system_router
from .users import router as users_router
from .world_id import router as world_id_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    world_id_router,
    users_router,
    leaderboard_router,
    food_router,
    payments_router,
)

__all__ = ["ALL_ROUTERS"]
