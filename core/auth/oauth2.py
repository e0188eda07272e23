"""Bearer token authentication for the workspace API.

Access tokens are issued by the workspace auth service. They are either
verified locally (HS256 JWT signed with JWT_SECRET) or, when
OAUTH2_INTROSPECTION_ENABLED is set, introspected remotely with the result
cached per token digest.
"""

import hashlib
from dataclasses import dataclass, field

from django.conf import settings
from django.core.cache import cache

import jwt
import requests
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rest_framework import authentication, exceptions

from core.logging.context import set_owner_id

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_TYPE = "access_token"
JWT_ALGORITHMS = ["HS256", "HS384", "HS512"]
INTROSPECTION_TIMEOUT_SECONDS = 5


@dataclass(frozen=True)
class OAuth2User:
    """Principal of an authenticated request.

    Not a Django user: the users table belongs to the identity service, so
    the principal only carries what the token says.
    """

    user_id: str
    client_id: str
    scopes: list[str] = field(default_factory=list)
    is_authenticated: bool = field(default=True, init=False)

    @property
    def owner_id(self) -> str:
        """User every owner-scoped service call acts for."""
        return self.user_id

    def has_scope(self, scope: str) -> bool:
        """Whether the token grants `scope`."""
        return scope in self.scopes

    def has_any_scope(self, *scopes: str) -> bool:
        """Whether the token grants at least one of `scopes`."""
        return any(self.has_scope(scope) for scope in scopes)


class TokenClaims(BaseModel):
    """Claims shared by verified JWTs and introspection responses."""

    model_config = ConfigDict(extra="ignore")

    active: bool = True
    sub: str | None = None
    user_id: str | None = None
    client_id: str | None = None
    scopes: list[str] = []
    scope: list[str] = []
    type: str | None = None

    @field_validator("scopes", "scope", mode="before")
    @classmethod
    def split_scope_string(cls, value):
        """Accept a space-delimited string as well as a list."""
        if value is None:
            return []
        if isinstance(value, str):
            return value.split()
        return value

    @field_validator("sub", "user_id", "client_id", mode="before")
    @classmethod
    def ids_as_strings(cls, value):
        return None if value is None else str(value)

    def to_user(self) -> OAuth2User:
        """Principal for these claims; client-credential tokens act as the client."""
        client_id = self.client_id or "unknown"
        return OAuth2User(
            user_id=self.user_id or self.sub or client_id,
            client_id=client_id,
            scopes=self.scopes or self.scope,
        )


def decode_jwt(token: str) -> TokenClaims:
    """Verify signature, expiry and token type of a JWT access token.

    Raises:
        AuthenticationFailed: If the token cannot be trusted.
    """
    if not settings.JWT_SECRET:
        logger.error("jwt_secret_missing")
        raise exceptions.AuthenticationFailed("JWT validation not configured")

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=JWT_ALGORITHMS)
    except jwt.ExpiredSignatureError as e:
        logger.info("jwt_expired")
        raise exceptions.AuthenticationFailed("Token has expired") from e
    except jwt.InvalidTokenError as e:
        logger.warning("jwt_invalid", error=str(e))
        raise exceptions.AuthenticationFailed("Invalid token") from e

    claims = _claims(payload)
    if claims.type != ACCESS_TOKEN_TYPE:
        logger.warning("jwt_wrong_type", token_type=claims.type)
        raise exceptions.AuthenticationFailed(f"Invalid token type: {claims.type}")
    return claims


def introspect(token: str) -> TokenClaims:
    """Ask the auth service whether a token is active.

    Active results are cached for OAUTH2_TOKEN_CACHE_TTL seconds under the
    token's sha256 digest, never the token itself.

    Raises:
        AuthenticationFailed: If the token is inactive or the service fails.
    """
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
    cache_key = f"{settings.OAUTH2_TOKEN_CACHE_PREFIX}{digest}"
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug("token_introspection_cache_hit")
        return _claims(cached)

    try:
        response = requests.post(
            settings.OAUTH2_INTROSPECT_URL,
            data={"token": token, "token_type_hint": ACCESS_TOKEN_TYPE},
            auth=(settings.OAUTH2_CLIENT_ID, settings.OAUTH2_CLIENT_SECRET),
            timeout=INTROSPECTION_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error("token_introspection_unavailable", error=str(e))
        raise exceptions.AuthenticationFailed(
            "Token validation service unavailable"
        ) from e

    if response.status_code != 200:
        logger.warning("token_introspection_failed", status_code=response.status_code)
        raise exceptions.AuthenticationFailed("Token introspection failed")

    payload = response.json()
    claims = _claims(payload)
    if not claims.active:
        logger.info("token_inactive")
        raise exceptions.AuthenticationFailed("Token is not active")

    cache.set(cache_key, payload, timeout=settings.OAUTH2_TOKEN_CACHE_TTL)
    return claims


def _claims(payload) -> TokenClaims:
    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as e:
        logger.warning("token_claims_invalid", error=str(e))
        raise exceptions.AuthenticationFailed("Invalid token") from e


class OAuth2Authentication(authentication.BaseAuthentication):
    """DRF backend reading `Authorization: Bearer <token>`.

    Requests without the header stay anonymous and are rejected by the
    scope permissions. The owner ID is bound into the logging context.
    """

    def authenticate(self, request):
        """Return `(OAuth2User, token)`, or None when no token was sent.

        Raises:
            AuthenticationFailed: Malformed header or untrusted token.
        """
        if not settings.OAUTH2_SERVICE_ENABLED:
            return None

        header = request.headers.get("authorization")
        if not header:
            return None

        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token or " " in token.strip():
            raise exceptions.AuthenticationFailed("Invalid authorization header format")
        token = token.strip()

        if settings.OAUTH2_INTROSPECTION_ENABLED:
            claims = introspect(token)
        else:
            claims = decode_jwt(token)

        user = claims.to_user()
        set_owner_id(user.owner_id)
        return (user, token)

    def authenticate_header(self, _request):
        """Challenge sent with 401 responses."""
        return "Bearer"
