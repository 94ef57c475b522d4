from __future__ import annotations
import logging
from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from .contracts import (
    AccessTokenResult, AuthResult, LoginRequest, MetaPayload, SessionContext,
    SignupRequest, UWFResponse,
)
from .deps import ACCESS_TOKEN_HEADER, REFRESH_TOKEN_HEADER, verify_session
from .errors import AuthServiceError
from .service import AuthService, get_auth_service

log = logging.getLogger("authservice.routes")

router = APIRouter(prefix="/users", tags=["users"])


def _meta(request: Request) -> MetaPayload:
    return MetaPayload(request_id=getattr(request.state, "request_id", None))


def _with_tokens(response: Response, result: AuthResult) -> None:
    response.headers[REFRESH_TOKEN_HEADER] = result.refresh_token
    response.headers[ACCESS_TOKEN_HEADER] = result.access_token


@router.post("", response_model=UWFResponse, status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest, request: Request, response: Response, svc: AuthService = Depends(get_auth_service)):
    result = svc.signup(req.email, req.password)
    _with_tokens(response, result)
    return UWFResponse(ok=True, result=result.user, meta=_meta(request))


@router.post("/login", response_model=UWFResponse)
def login(req: LoginRequest, request: Request, response: Response, svc: AuthService = Depends(get_auth_service)):
    result = svc.login(req.email, req.password)
    _with_tokens(response, result)
    return UWFResponse(ok=True, result=result.user, meta=_meta(request))


@router.get("/me/access-token", response_model=UWFResponse)
def refresh_access_token(
    request: Request,
    response: Response,
    ctx: SessionContext = Depends(verify_session),
    svc: AuthService = Depends(get_auth_service),
):
    access_token = svc.issue_access_token(ctx.user_id)
    response.headers[ACCESS_TOKEN_HEADER] = access_token
    return UWFResponse(ok=True, result=AccessTokenResult(access_token=access_token), meta=_meta(request))


@router.delete("/me/session", response_model=UWFResponse)
def logout(request: Request, ctx: SessionContext = Depends(verify_session), svc: AuthService = Depends(get_auth_service)):
    svc.logout(ctx.user_id, ctx.refresh_token)
    return UWFResponse(ok=True, result={"revoked": True}, meta=_meta(request))


async def _auth_error_handler(request: Request, exc: AuthServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("auth_error code=%s path=%s", exc.code, request.url.path)
    body = UWFResponse(ok=False, error=exc.to_payload(), meta=_meta(request))
    headers = {"Retry-After": "1"} if exc.retriable else None
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"), headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthServiceError, _auth_error_handler)
