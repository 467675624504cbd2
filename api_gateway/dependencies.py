"""
FastAPI dependencies.

Authentication and service wiring.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from shared.config import Settings, settings
from shared.database import DatabaseClient
from shared.errors import ConfigError
from shared.logging import get_logger

from api_gateway.services.aura_service import AuraService
from api_gateway.services.reading_store import InMemoryReadingStore, ReadingStore, SupabaseReadingStore

logger = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)  # Don't auto-raise on missing token

_aura_service: Optional[AuraService] = None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Validate the Bearer JWT and return the current user.

    Returns:
        Dictionary with user_id

    Raises:
        HTTPException: If the token is missing or invalid
    """
    if credentials is None:
        logger.warning("No token provided in Authorization header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not settings.jwt_secret_key:
        logger.error("JWT_SECRET_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication is not configured",
        )

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning("JWT validation failed", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    user_id = payload.get("sub") or payload.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"user_id": str(user_id), "email": payload.get("email")}


def build_reading_store(settings: Settings) -> ReadingStore:
    """
    Pick the reading store for this deployment.

    Supabase when configured. Process memory is only allowed in development
    and test, since the daily scan limit counts stored readings.

    Raises:
        ConfigError: If Supabase is not configured in staging or production
    """
    if settings.database_configured:
        return SupabaseReadingStore(DatabaseClient.from_settings(settings), settings.aura_readings_table)
    if settings.environment in ("staging", "production"):
        raise ConfigError(f"SUPABASE_URL and SUPABASE_SERVICE_KEY are required in {settings.environment}")
    logger.warning("Supabase not configured, storing aura readings in process memory")
    return InMemoryReadingStore()


def get_aura_service() -> AuraService:
    """Return the process-wide aura service."""
    global _aura_service
    if _aura_service is None:
        _aura_service = AuraService.from_settings(settings, build_reading_store(settings))
    return _aura_service
