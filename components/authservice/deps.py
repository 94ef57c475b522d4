from fastapi import Depends, Request

from .contracts import SessionContext
from .service import AuthService, get_auth_service

ACCESS_TOKEN_HEADER = "x-access-token"
REFRESH_TOKEN_HEADER = "x-refresh-token"
USER_ID_HEADER = "_id"


def authenticate(request: Request, auth: AuthService = Depends(get_auth_service)) -> str:
    """
    Access-token gate for resource routes. Stateless: the token signature and
    expiry are checked without touching the user store.
    Returns the caller's user id and mirrors it on request.state.user_id.
    """
    user_id = auth.require_access_token(request.headers.get(ACCESS_TOKEN_HEADER))
    request.state.user_id = user_id
    return user_id


def verify_session(request: Request, auth: AuthService = Depends(get_auth_service)) -> SessionContext:
    """
    Refresh-token gate. Requires both the refresh token and the user id
    headers, so validation is a single user-document lookup.
    """
    ctx = auth.verify_session(
        request.headers.get(USER_ID_HEADER),
        request.headers.get(REFRESH_TOKEN_HEADER),
    )
    request.state.user_id = ctx.user_id
    request.state.user = ctx.user
    request.state.refresh_token = ctx.refresh_token
    return ctx
