"""NIGHTSHIFT - night-shift anomaly surveillance.

Main FastAPI application.
"""

import asyncio
import random
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.config import settings
from app.routers import shift_router
from nightshift import __version__
from nightshift.comms.event_bus import EventBus
from nightshift.simulation.runner import ShiftRunner
from nightshift.simulation.shift import ShiftController
from nightshift.simulation.timers import LoopTimers


# ---------------------------------------------------------------------------
# Subsystem startup helpers
# ---------------------------------------------------------------------------

def _create_shift_controller(event_bus: EventBus) -> ShiftController:
    """Build the controller with timers on the running event loop."""
    config = settings.shift_config()
    rng = random.Random(settings.rng_seed) if settings.rng_seed is not None else None
    controller = ShiftController(
        event_bus,
        LoopTimers(asyncio.get_running_loop()),
        config=config,
        rng=rng,
    )
    logger.info(
        f"Shift controller ready: {len(controller.rooms)} cameras, "
        f"{config.duration:.0f}s shift at {config.real_seconds_per_hour:.0f} real s/hour, "
        f"max {config.max_anomalies} undetected"
    )
    if settings.rng_seed is not None:
        logger.info(f"Deterministic shifts: rng_seed={settings.rng_seed}")
    return controller


def _shutdown_shift(controller: ShiftController | None) -> None:
    if controller is not None and controller.is_active:
        logger.info("Aborting active shift...")
        controller.abort()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info(f"  {settings.app_name} v{__version__} - INITIALIZING")
    logger.info("=" * 60)

    event_bus = EventBus()
    controller = _create_shift_controller(event_bus)
    runner = ShiftRunner(controller, tick_hz=settings.tick_hz)

    app.state.event_bus = event_bus
    app.state.shift_controller = controller
    app.state.shift_runner = runner

    logger.info("=" * 60)
    logger.info(f"  {settings.app_name} ONLINE")
    logger.info("=" * 60)

    yield

    _shutdown_shift(controller)
    await runner.stop()
    logger.info(f"{settings.app_name} shutting down...")


# Create FastAPI app
app = FastAPI(
    title="NIGHTSHIFT",
    description="Night-shift anomaly surveillance",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(shift_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "operational",
        "version": __version__,
        "system": settings.app_name,
    }


@app.get("/api/status")
async def status():
    """System status endpoint."""
    controller = getattr(app.state, "shift_controller", None)
    return {
        "name": settings.app_name,
        "version": __version__,
        "shift_state": controller.state.value if controller else None,
        "shift_duration": settings.shift_duration,
        "max_anomalies": settings.max_anomalies,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
