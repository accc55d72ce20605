"""
Authentication for the E-Shop backend

- HS256 JWT issue/verification (python-jose)
- bcrypt password hashing context (passlib)
- AccessGateMiddleware: every request outside the public allow-list must
  carry a valid bearer token whose claim is not revoked
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, FrozenSet, List, Optional

from fastapi import Request, status
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, Field
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from app.core.config import Settings
from app.core.exceptions import AuthenticationError, error_body

logger = logging.getLogger(__name__)


class TokenClaims(BaseModel):
    """Payload carried by our access tokens"""
    user_id: str = Field(..., alias="userId")
    is_admin: bool = Field(False, alias="isAdmin")
    iat: Optional[int] = None
    exp: int

    model_config = ConfigDict(populate_by_name=True)


def build_password_context(rounds: int) -> CryptContext:
    """bcrypt context with the configured work factor"""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def issue_token(user_id: str, is_admin: bool, settings: Settings, now: Optional[datetime] = None) -> str:
    """
    Sign an access token for a user

    Payload: {userId, isAdmin, iat, exp}; exp is iat + TOKEN_TTL_SECONDS (1 day by default).
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "userId": str(user_id),
        "isAdmin": bool(is_admin),
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=settings.TOKEN_TTL_SECONDS),
    }
    return jwt.encode(payload, settings.TOKEN_SECRET, algorithm=settings.TOKEN_ALGORITHM)


def decode_token(token: str, settings: Settings) -> TokenClaims:
    """
    Verify signature and expiry of a token and return its claims

    Raises:
        AuthenticationError: expired, tampered or malformed token
    """
    try:
        payload = jwt.decode(token, settings.TOKEN_SECRET, algorithms=[settings.TOKEN_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        raise AuthenticationError(f"Invalid token: {str(e)}")

    if not payload.get("userId") or payload.get("exp") is None:
        raise AuthenticationError("Invalid token payload: missing userId or exp")

    return TokenClaims(**payload)


def is_revoked(claims: TokenClaims) -> bool:
    """
    Revocation predicate applied to every verified claim

    Only administrators may call protected routes; a valid token without
    the admin flag is treated the same as no token at all.
    """
    return not claims.is_admin


@dataclass(frozen=True)
class PublicRoute:
    """A path pattern that bypasses token verification for the given methods (None = any)"""
    pattern: re.Pattern
    methods: Optional[FrozenSet[str]] = None

    def matches(self, method: str, path: str) -> bool:
        if self.methods is not None and method not in self.methods:
            return False
        return self.pattern.match(path) is not None


READ_ONLY = frozenset({"GET", "OPTIONS"})


def build_public_routes(settings: Settings) -> List[PublicRoute]:
    """Allow-list: catalog reads, static uploads, login/register and service endpoints"""
    api = re.escape(settings.api_prefix)
    return [
        PublicRoute(re.compile(r"^/public/uploads(/.*)?$"), READ_ONLY),
        PublicRoute(re.compile(rf"^{api}/products(/.*)?$"), READ_ONLY),
        PublicRoute(re.compile(rf"^{api}/categories(/.*)?$"), READ_ONLY),
        PublicRoute(re.compile(rf"^{api}/users/login/?$")),
        PublicRoute(re.compile(rf"^{api}/users/register/?$")),
        PublicRoute(re.compile(r"^/(health|docs|redoc|openapi\.json)?$"), READ_ONLY),
    ]


class AccessGateMiddleware(BaseHTTPMiddleware):
    """
    Decides per request whether a valid privileged claim is required

    Public routes pass straight through. Everything else needs
    `Authorization: Bearer <token>` that verifies and is not revoked;
    otherwise the request is answered with 401 before reaching a router.
    """

    def __init__(
        self,
        app,
        settings: Settings,
        revoked: Callable[[TokenClaims], bool] = is_revoked,
    ):
        super().__init__(app)
        self.settings = settings
        self.revoked = revoked
        self.public_routes = build_public_routes(settings)

    def is_public(self, method: str, path: str) -> bool:
        return any(route.matches(method, path) for route in self.public_routes)

    async def dispatch(self, request: Request, call_next):
        if self.is_public(request.method, request.url.path):
            return await call_next(request)

        try:
            claims = self.authenticate(request.headers.get("Authorization"))
        except AuthenticationError as e:
            logger.info(f"Rejected {request.method} {request.url.path}: {e.message}")
            # Return JSONResponse instead of raising so CORS headers still apply
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content=error_body(e.message),
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.claims = claims
        return await call_next(request)

    def authenticate(self, auth_header: Optional[str]) -> TokenClaims:
        if not auth_header or not auth_header.startswith("Bearer "):
            raise AuthenticationError("Authentication required")

        claims = decode_token(auth_header[len("Bearer "):].strip(), self.settings)
        if self.revoked(claims):
            raise AuthenticationError("The user is not authorized")
        return claims
