"""API routes through which position sources report to the monitor."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from sealevel_alarm.elevation.monitor import ElevationMonitor
from sealevel_alarm.elevation.schemas import (
    AcceptedResponse,
    Coordinate,
    MonitorStatus,
    PositionErrorReport,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["position"])


def get_elevation_monitor(request: Request) -> ElevationMonitor:
    """FastAPI dependency that retrieves the ElevationMonitor from app state."""
    monitor: ElevationMonitor = request.app.state.elevation_monitor
    return monitor


@router.post(
    "/position",
    response_model=AcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Report a position update",
)
async def position_updated(
    coordinate: Coordinate,
    monitor: Annotated[ElevationMonitor, Depends(get_elevation_monitor)],
) -> AcceptedResponse:
    """Schedule an elevation lookup for the reported position.

    The lookup runs in the background; a newer report supersedes one that
    is still outstanding.
    """
    monitor.on_position_updated(coordinate)
    return AcceptedResponse()


@router.post(
    "/position/timeout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Report a position update timeout",
)
async def position_update_timeout(
    monitor: Annotated[ElevationMonitor, Depends(get_elevation_monitor)],
) -> None:
    monitor.on_position_update_timeout()


@router.post(
    "/position/error",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Report a position source error",
)
async def position_error(
    report: PositionErrorReport,
    monitor: Annotated[ElevationMonitor, Depends(get_elevation_monitor)],
) -> None:
    monitor.on_position_error(report.error)


@router.get("/status", response_model=MonitorStatus, summary="Current monitor state")
async def monitor_status(
    monitor: Annotated[ElevationMonitor, Depends(get_elevation_monitor)],
) -> MonitorStatus:
    return MonitorStatus(
        state=monitor.state,
        provider=monitor.provider.value,
        threshold_meters=monitor.threshold_meters,
    )
