"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: routers carry no auth of their own. AccessPolicyMiddleware
denies anonymous callers everywhere except login and user creation
(see PUBLIC_ROUTES in userdir.auth.dependencies).
"""

from fastapi import APIRouter

from userdir.api.auth import router as auth_router
from userdir.api.health import router as health_router
from userdir.api.users import router as users_router

api_router = APIRouter()

# Health needs an identity; login is public
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# POST /user/v1/user is public, the rest require a valid token
api_router.include_router(users_router, tags=["users"])
