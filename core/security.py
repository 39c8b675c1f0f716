# core/security.py
import uuid
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from core.config import ALGORITHM, SECRET_KEY, SESSION_TTL_DAYS


def create_session_token(session_id: Optional[str] = None) -> tuple:
    """Return (session_id, signed token). A new id is minted when none is given."""
    sid = session_id or str(uuid.uuid4())
    exp = datetime.utcnow() + timedelta(days=SESSION_TTL_DAYS)
    token = jwt.encode({"sid": sid, "exp": exp}, SECRET_KEY, algorithm=ALGORITHM)
    return sid, token


def decode_session_token(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None
