"""Shift control API — briefing, start, report anomalies, debrief."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from nightshift.simulation.anomaly import AnomalyKind

router = APIRouter(prefix="/api/shift", tags=["shift"])


class AnomalyReport(BaseModel):
    room: str
    kind: AnomalyKind


class CameraSelect(BaseModel):
    index: int


def _get_controller(request: Request):
    """Retrieve the ShiftController from app state."""
    controller = getattr(request.app.state, "shift_controller", None)
    if controller is None:
        raise HTTPException(503, "Shift controller not available")
    return controller


def _state_name(controller) -> str:
    state = controller.state
    return getattr(state, "value", state)


@router.get("/state")
async def get_shift_state(request: Request):
    """Get current shift state."""
    controller = _get_controller(request)
    return controller.get_state()


@router.post("/briefing")
async def begin_briefing(request: Request):
    """Enter the free-look study period before a shift."""
    controller = _get_controller(request)
    if not controller.begin_briefing():
        raise HTTPException(400, f"Cannot begin briefing in state: {_state_name(controller)}")
    return {"status": "briefing", "camera_label": controller.camera_labels[0]}


@router.post("/start")
async def start_shift(request: Request):
    """Start the shift: counters zeroed, clock and spawner running."""
    controller = _get_controller(request)
    if not controller.start_shift():
        raise HTTPException(400, f"Cannot start shift in state: {_state_name(controller)}")
    runner = getattr(request.app.state, "shift_runner", None)
    if runner is not None:
        runner.start()
    return {"status": "active", "clock": controller.clock.label}


@router.post("/report")
async def report_anomaly(report: AnomalyReport, request: Request):
    """Report an anomaly. A wrong report counts against the operator."""
    controller = _get_controller(request)
    if _state_name(controller) != "active":
        raise HTTPException(400, f"Reports are only accepted during a shift (state: {_state_name(controller)})")
    resolved = controller.report(report.room, report.kind)
    return {
        "resolved": resolved,
        "undetected": controller.undetected_count,
        "state": _state_name(controller),
    }


@router.post("/camera")
async def select_camera(camera: CameraSelect, request: Request):
    """Switch the viewed CCTV camera."""
    controller = _get_controller(request)
    try:
        label = controller.select_camera(camera.index)
    except IndexError as e:
        raise HTTPException(400, str(e))
    return {
        "camera": camera.index,
        "camera_label": label,
        "glitch": controller.glitch_level(),
    }


@router.post("/abort")
async def abort_shift(request: Request):
    """End the running shift early."""
    controller = _get_controller(request)
    if not controller.abort():
        raise HTTPException(400, f"No shift to abort in state: {_state_name(controller)}")
    return {"status": "aborted", "report": controller.last_report.to_dict()}


@router.post("/reset")
async def reset_shift(request: Request):
    """Return to idle with a fresh house."""
    controller = _get_controller(request)
    if not controller.reset():
        raise HTTPException(400, "Cannot reset during an active shift; abort it first")
    return {"status": "reset", "state": "idle"}


@router.get("/report")
async def get_shift_report(request: Request):
    """Debrief for the most recently finished shift."""
    controller = _get_controller(request)
    if controller.last_report is None:
        raise HTTPException(404, "No shift report available")
    return controller.last_report.to_dict()
