from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/", tags=["health"])
def health(request: Request):
    settings = request.app.state.settings
    return {
        "message": "Admin API",
        "version": "1.0.0",
        "status": "running",
        "port": settings.port,
        "environment": settings.normalized_environment,
        "endpoints": [
            "GET /todos",
            "GET /users",
            "GET /products",
            "GET /orders",
            "GET /coupons",
            "GET /milestones",
            "GET /epics",
            "GET /projects",
            "GET /userGroups",
            "GET /subscriptionMembers",
            "GET /issues",
            "POST /auth/register",
            "POST /auth/login",
        ],
    }
