from typing import Any, Dict

from fastapi import APIRouter, Request

from product_sync.utils.service_health import ServiceHealthChecker

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """Database and bus publisher health for the warehouse service."""
    state = request.app.state
    checker = ServiceHealthChecker("warehouse-service", state.settings.APP_VERSION)
    checker.add_check("database", state.database_manager.health_check)
    checker.add_check("event_publisher", state.event_manager.health_check_events)
    return await checker.run_checks()
