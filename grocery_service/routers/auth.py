import logging
import random
import secrets
import string
import time
from typing import Optional

from fastapi import APIRouter, Header, HTTPException
from fastapi.responses import JSONResponse

from .. import config
from ..schemas import LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/auth", tags=["auth"])

TOKEN_PREFIX = "admin_"
ADMIN_USER = {"username": config.ADMIN_USERNAME, "role": "admin"}


def _matches(given, expected):
    return secrets.compare_digest(given.encode(), expected.encode())


def issue_token():
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{TOKEN_PREFIX}{int(time.time() * 1000)}_{suffix}"


@router.post("/login")
def login(req: LoginRequest):
    if not (_matches(req.username, config.ADMIN_USERNAME) and _matches(req.password, config.ADMIN_PASSWORD)):
        logger.warning("Failed admin login for %r", req.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return {"token": issue_token(), "user": ADMIN_USER}


# Only the token shape is checked; tokens are not stored server-side.
@router.get("/verify")
def verify(authorization: Optional[str] = Header(None)):
    token = (authorization or "").removeprefix("Bearer ")
    if token.startswith(TOKEN_PREFIX):
        return {"authenticated": True, "user": ADMIN_USER}
    return JSONResponse(status_code=401, content={"authenticated": False})
