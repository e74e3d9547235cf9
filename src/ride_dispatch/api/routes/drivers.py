from fastapi import APIRouter, Depends

from ride_dispatch.api.auth import verify_api_key
from ride_dispatch.api.dependencies import LocationTrackerDep
from ride_dispatch.api.models import LocationReport, StatusUpdate
from ride_dispatch.driver import DriverLocationSample

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.put("/{driver_id}/location", response_model=DriverLocationSample)
def report_location(driver_id: str, body: LocationReport, tracker: LocationTrackerDep):
    return tracker.report_location(driver_id, **body.model_dump())


@router.put("/{driver_id}/status", status_code=204)
def set_status(driver_id: str, body: StatusUpdate, tracker: LocationTrackerDep):
    tracker.set_status(driver_id, body.status)
