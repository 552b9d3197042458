"""HTTP and WebSocket routes."""

from fastapi import APIRouter

from userlist.api import auth, health, relay, users

router = APIRouter()
router.include_router(auth.router, tags=["login"])
router.include_router(users.router, tags=["users"])
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(relay.router, tags=["relay"])
