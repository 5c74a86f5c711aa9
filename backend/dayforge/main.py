"""Main FastAPI application for the DayForge backend."""
from fastapi import FastAPI, Request

from dayforge.api.routes.blocks import router as blocks_router
from dayforge.api.routes.day_history import router as day_history_router
from dayforge.api.routes.day_plan import router as day_plan_router
from dayforge.api.routes.jobs import router as jobs_router
from dayforge.core.config import settings
from dayforge.core.logging import configure_logging
from dayforge.core.middleware import RequestIDMiddleware
from dayforge.observability.client import init_opik
from dayforge.observability.tracing import trace

configure_logging(log_level=settings.log_level, planner_log_level=settings.planner_log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(day_plan_router)
app.include_router(blocks_router)
app.include_router(day_history_router)
app.include_router(jobs_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness check")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can check the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
