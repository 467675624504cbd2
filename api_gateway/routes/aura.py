"""
Aura endpoints.

Scan eligibility, scanning, reading history and stats.
"""

from typing import Awaitable, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, UploadFile, status
from pydantic import BaseModel

from shared.errors import EligibilityError, NotFoundError, ValidationError
from shared.logging import get_logger
from shared.models.aura import AuraReading, AuraReadingPage, AuraStats, ScanEligibility

from api_gateway.dependencies import get_aura_service, get_current_user
from api_gateway.services.aura_service import AuraService

logger = get_logger(__name__)

router = APIRouter(prefix="/aura")


class ScanRequest(BaseModel):
    image_url: Optional[str] = None
    image_data: Optional[str] = None


def _parse_reading_id(reading_id: str) -> UUID:
    try:
        return UUID(reading_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid reading ID")


async def _run_scan(scan: Awaitable[AuraReading]) -> AuraReading:
    try:
        return await scan
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except EligibilityError as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=e.message)


@router.get("/scan/check", response_model=ScanEligibility)
async def check_scan_eligibility(
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    """Report whether the user can scan today and how many scans remain."""
    return await service.check_eligibility(current_user["user_id"])


@router.post("/scan", status_code=status.HTTP_201_CREATED, response_model=AuraReading)
async def scan(
    body: ScanRequest,
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    """
    Scan an image given as a URL or base64 data.

    Returns:
        The stored reading
    """
    return await _run_scan(
        service.create(current_user["user_id"], image_url=body.image_url, image_data=body.image_data)
    )


@router.post("/scan/upload", status_code=status.HTTP_201_CREATED, response_model=AuraReading)
async def scan_with_upload(
    image: UploadFile = File(...),
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    """Scan a multipart JPEG/PNG upload."""
    content = await image.read()
    return await _run_scan(service.create_from_upload(current_user["user_id"], content, image.content_type))


@router.get("/stats", response_model=AuraStats)
async def get_stats(
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    """Aggregate color distribution and average energy/mood."""
    return await service.stats(current_user["user_id"])


@router.get("/latest", response_model=AuraReading)
async def get_latest(
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    try:
        return await service.latest(current_user["user_id"])
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("/today", response_model=AuraReading)
async def get_today(
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    try:
        return await service.today(current_user["user_id"])
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("/{reading_id}", response_model=AuraReading)
async def get_reading(
    reading_id: str = Path(...),
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    try:
        return await service.get(current_user["user_id"], _parse_reading_id(reading_id))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reading not found")


@router.delete("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reading(
    reading_id: str = Path(...),
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    try:
        await service.delete(current_user["user_id"], _parse_reading_id(reading_id))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reading not found")


@router.get("", response_model=AuraReadingPage)
async def list_readings(
    page: int = Query(1),
    page_size: int = Query(20),
    current_user: dict = Depends(get_current_user),
    service: AuraService = Depends(get_aura_service),
):
    """Paginated readings, newest first."""
    readings, total, page, page_size = await service.list(current_user["user_id"], page, page_size)
    return AuraReadingPage(data=readings, page=page, page_size=page_size, total_count=total)
