from fastapi import APIRouter, Depends

from ride_dispatch.api.auth import verify_api_key
from ride_dispatch.api.dependencies import BookingServiceDep
from ride_dispatch.api.models import FareEstimateRequest
from ride_dispatch.fare import FareBreakdown

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("/estimate", response_model=FareBreakdown)
def estimate(body: FareEstimateRequest, booking: BookingServiceDep):
    return booking.estimate(body.pickup, body.destination, body.service_class)
