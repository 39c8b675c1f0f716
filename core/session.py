# core/session.py
from fastapi import Request

from core.config import SESSION_COOKIE, SESSION_TTL_DAYS
from core.security import create_session_token, decode_session_token


async def session_middleware(request: Request, call_next):
    """Attach a visitor session id to every request, issuing a cookie when missing."""
    sid = decode_session_token(request.cookies.get(SESSION_COOKIE))
    token = None
    if sid is None:
        sid, token = create_session_token()
    request.state.session_id = sid

    response = await call_next(request)

    if token is not None:
        response.set_cookie(
            key=SESSION_COOKIE,
            value=token,
            max_age=SESSION_TTL_DAYS * 24 * 3600,
            httponly=True,
            secure=False,     # enable behind HTTPS
            samesite="lax",
        )
    return response
