"""
Service Health Check Utilities
==============================
"""

import time
from typing import Any, Awaitable, Callable, Dict

HealthCheck = Callable[[], Awaitable[bool]]


class ServiceHealthChecker:
    """Runs named async checks and aggregates them into one report"""

    def __init__(self, service_name: str, version: str = "1.0.0") -> None:
        self.service_name = service_name
        self.version = version
        self.checks: Dict[str, HealthCheck] = {}
        self.start_time = time.time()

    def add_check(self, name: str, check_func: HealthCheck) -> None:
        """Add a health check function"""
        self.checks[name] = check_func

    async def run_checks(self) -> Dict[str, Any]:
        """Run all health checks"""
        results: Dict[str, Dict[str, Any]] = {}
        check_start_time = time.time()

        for name, check_func in self.checks.items():
            individual_start = time.time()
            try:
                healthy = await check_func()
                results[name] = {"status": "healthy" if healthy else "unhealthy"}
            except Exception as e:
                results[name] = {"status": "error", "error": str(e)}
            results[name]["duration_ms"] = round(
                (time.time() - individual_start) * 1000, 2
            )

        total_time = (time.time() - check_start_time) * 1000

        return {
            "service": self.service_name,
            "version": self.version,
            "status": "healthy"
            if all(r["status"] == "healthy" for r in results.values())
            else "unhealthy",
            "checks": results,
            "total_duration_ms": round(total_time, 2),
            "uptime_seconds": round(time.time() - self.start_time, 2),
            "timestamp": time.time(),
        }
