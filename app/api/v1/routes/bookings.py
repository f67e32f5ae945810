from fastapi import APIRouter, Depends, status
from app.schemas import BookingCreate, BookingUpdate, BookingOut
from app.db.session import get_session
from app.services.booking_service import BookingService
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

router = APIRouter(prefix="/bookings", tags=["bookings"])

def get_booking_service(session: AsyncSession = Depends(get_session)) -> BookingService:
    return BookingService(session)

@router.post("/", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    payload: BookingCreate,
    booking_service: BookingService = Depends(get_booking_service)
):
    return await booking_service.create_booking(payload)

@router.patch("/{booking_id}", response_model=BookingOut)
async def update_booking_endpoint(
    booking_id: UUID,
    payload: BookingUpdate,
    booking_service: BookingService = Depends(get_booking_service)
):
    return await booking_service.update_booking(booking_id, payload)
