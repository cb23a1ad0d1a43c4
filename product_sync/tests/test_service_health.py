import pytest

from product_sync.utils.service_health import ServiceHealthChecker


async def healthy() -> bool:
    return True


async def unhealthy() -> bool:
    return False


async def broken() -> bool:
    raise ConnectionError("no route to host")


class TestServiceHealthChecker:
    @pytest.mark.asyncio
    async def test_all_checks_healthy(self):
        checker = ServiceHealthChecker("shop-service", "1.2.3")
        checker.add_check("database", healthy)

        report = await checker.run_checks()

        assert report["service"] == "shop-service"
        assert report["version"] == "1.2.3"
        assert report["status"] == "healthy"
        assert report["checks"]["database"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_one_failing_check_marks_service_unhealthy(self):
        checker = ServiceHealthChecker("warehouse-service")
        checker.add_check("database", healthy)
        checker.add_check("event_publisher", unhealthy)
        checker.add_check("cache", broken)

        report = await checker.run_checks()

        assert report["status"] == "unhealthy"
        assert report["checks"]["event_publisher"]["status"] == "unhealthy"
        assert report["checks"]["cache"] == {
            "status": "error",
            "error": "no route to host",
            "duration_ms": report["checks"]["cache"]["duration_ms"],
        }
