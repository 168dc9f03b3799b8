from typing import Sequence
from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from storefront.common.utils import build_error, json_error
from storefront.user.dependencies import Authentication
from storefront.user.repository import identify_user_by_pid
from storefront.middlewares.constants import logger


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Resolves the bearer token to a user row and pins it on request.state.

    Routes behind this middleware never accept a user id from the caller; they
    read request.state.user_identifier.
    """
    def __init__(self, app, *, session_maker, public_paths: Sequence[str]):
        super().__init__(app)
        self.session_maker = session_maker
        self.public_paths = tuple(public_paths)

    async def dispatch(self, request: Request, call_next):

        if request.url.path.startswith(self.public_paths):
            return await call_next(request)

        logger.debug("auth.middleware.attempt", extra={
            "path": request.url.path,
            "method": request.method
        })

        try:
            auth_token = await Authentication()(request)
        except HTTPException as e:
            logger.warning("auth.middleware.failed", extra={
                "reason": e.detail,
                "path": request.url.path,
                "method": request.method
            })
            payload = build_error(code="INVALID_AUTH", details={"message":"Missing or Invalid Auth Headers"})
            return json_error(payload, status_code=status.HTTP_401_UNAUTHORIZED)

        user_pid = auth_token.get("sub")

        async with self.session_maker() as session:
            user_identifier=await identify_user_by_pid(session,user_pid)

        if not user_identifier:
            logger.warning("auth.middleware.user_not_found", extra={
                "user_public_id": user_pid,
                "path": request.url.path
            })
            payload = build_error(code="INVALID_AUTH", details={"message":"User unidentified and not authorized"})
            return json_error(payload, status_code=status.HTTP_403_FORBIDDEN)

        request.state.user_identifier = user_identifier
        request.state.user_public_id = user_pid  # for logging
        request.state.user_roles = auth_token.get("roles") or []

        return await call_next(request)
