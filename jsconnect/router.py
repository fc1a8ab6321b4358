"""
jsConnect HTTP Router
=====================
FastAPI router exposing the jsConnect endpoint.

Usage:
    from jsconnect import JSConnect, ClientConfig
    from jsconnect.router import create_jsconnect_router
    
    def current_user(request: Request) -> dict:
        user = request.state.user
        return {"uniqueid": user.id, "name": user.name, "email": user.email}
    
    app.include_router(create_jsconnect_router(JSConnect.factory(), current_user))
"""

from typing import Any, Callable, Dict, Optional, Union

from fastapi import APIRouter, Depends
from starlette.requests import Request
from starlette.responses import Response

from .handshake import JSConnect
from .signing import LegacySelector, SecurityMode


def create_jsconnect_router(
    connect: JSConnect,
    get_user: Callable[..., Optional[Dict[str, Any]]],
    path: str = "/sso/jsconnect",
    security: Union[SecurityMode, LegacySelector] = True,
) -> APIRouter:
    """
    Create a router serving the jsConnect handshake.
    
    Args:
        connect: Configured JSConnect instance
        get_user: FastAPI dependency returning the signed-in user's claims
            (empty or None when nobody is signed in)
        path: Endpoint path
        security: SecurityMode or legacy selector passed to every handshake
    
    Returns:
        FastAPI router with a single GET endpoint
    """
    mode = connect.signer.mode(security)
    router = APIRouter(tags=["SSO"])
    
    @router.get(path)
    async def jsconnect_endpoint(
        request: Request,
        user: Optional[Dict[str, Any]] = Depends(get_user),
    ) -> Response:
        """jsConnect handshake; errors are returned as payloads with status 200."""
        result = connect.respond(user or {}, dict(request.query_params), mode)
        return Response(content=result.body, media_type=result.content_type)
    
    return router
