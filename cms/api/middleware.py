"""API middleware: correlation ID, current user, request audit."""

import json
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from cms.core.context import correlation_id_ctx, current_user_ctx
from cms.security.users import User

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
USER_ID_HEADER = "X-User-ID"
USER_ROLES_HEADER = "X-User-Roles"
USER_NAME_HEADER = "X-User-Name"

PUBLIC_PATHS = frozenset({"/health", "/metrics"})


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class UserContextMiddleware(BaseHTTPMiddleware):
    """
    Read the user asserted by the authenticating gateway (X-User-ID, X-User-Roles).
    Return 401 if missing on non-public paths; attach to request.state and request-scoped context.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.user = None
        raw_id = (request.headers.get(USER_ID_HEADER) or "").strip()
        if raw_id:
            try:
                user_id = int(raw_id)
            except ValueError:
                return JSONResponse(
                    status_code=401,
                    content={"detail": f"{USER_ID_HEADER} header must be an integer"},
                )
            roles = (request.headers.get(USER_ROLES_HEADER) or "").split(",")
            request.state.user = User.from_role_names(
                user_id, roles, username=request.headers.get(USER_NAME_HEADER, "")
            )
        elif request.url.path not in PUBLIC_PATHS:
            return JSONResponse(
                status_code=401,
                content={"detail": f"{USER_ID_HEADER} header is required"},
            )
        current_user_ctx.set(request.state.user)
        return await call_next(request)


class AuditTriggerMiddleware(BaseHTTPMiddleware):
    """After response: log structured audit event (correlation_id, user_id, path, method, status_code)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        correlation_id = getattr(request.state, "correlation_id", None)
        user = getattr(request.state, "user", None)
        audit_event = {
            "event": "request_audit",
            "correlation_id": correlation_id,
            "user_id": user.id if user is not None else None,
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
        }
        logger.info(json.dumps(audit_event))
        return response
