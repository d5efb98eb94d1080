"""API routes."""

from fastapi import APIRouter

from timeline.routes import posts, users

api_router = APIRouter()

# Timeline and single post
api_router.include_router(posts.router, prefix="/v1/posts", tags=["posts"])

# User pages
api_router.include_router(users.router, prefix="/v1/users", tags=["users"])
