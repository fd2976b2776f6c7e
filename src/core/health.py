"""Health check endpoint and service status monitoring.

Example:
    checker = HealthChecker(version="1.0.0")
    checker.add_check("database", check_database)
    server = await start_health_server(checker, port=8080)
"""

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from aiohttp import web

from src.core.logging import get_logger

logger = get_logger(__name__)

CHECK_TIMEOUT_SECONDS = 10.0


class ServiceStatus(Enum):
    """Status of an individual service."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class ServiceCheck:
    """Result of a single service health check."""

    name: str
    status: ServiceStatus
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """Aggregated health report for all services."""

    status: ServiceStatus
    timestamp: str
    checks: list[ServiceCheck]
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": {
                check.name: {
                    "status": check.status.value,
                    "message": check.message,
                    "details": check.details,
                }
                for check in self.checks
            },
        }


HealthCheckFunc = Callable[[], Coroutine[Any, Any, ServiceCheck]]


class HealthChecker:
    """Runs the registered service checks and aggregates their status."""

    def __init__(self, version: str | None = None) -> None:
        self._checks: dict[str, HealthCheckFunc] = {}
        self._version = version

    def add_check(self, name: str, check_func: HealthCheckFunc) -> None:
        """Register a health check function."""
        self._checks[name] = check_func

    async def _run_check(self, name: str, check_func: HealthCheckFunc) -> ServiceCheck:
        try:
            return await asyncio.wait_for(check_func(), timeout=CHECK_TIMEOUT_SECONDS)
        except TimeoutError:
            return ServiceCheck(name, ServiceStatus.UNHEALTHY, "Health check timed out")
        except Exception as ex:
            return ServiceCheck(name, ServiceStatus.UNHEALTHY, str(ex))

    async def check_all(self) -> HealthReport:
        """Run all registered checks concurrently.

        The overall status is the worst individual status.
        """
        checks = list(
            await asyncio.gather(
                *(self._run_check(name, func) for name, func in self._checks.items())
            )
        )

        statuses = {check.status for check in checks}
        if ServiceStatus.UNHEALTHY in statuses:
            overall = ServiceStatus.UNHEALTHY
        elif ServiceStatus.DEGRADED in statuses:
            overall = ServiceStatus.DEGRADED
        else:
            overall = ServiceStatus.HEALTHY

        return HealthReport(
            status=overall,
            timestamp=datetime.now(UTC).isoformat(),
            checks=checks,
            version=self._version,
        )


class HealthServer:
    """HTTP server exposing /health (full report) and /live (process up)."""

    def __init__(self, checker: HealthChecker, host: str = "0.0.0.0", port: int = 8080) -> None:
        self._checker = checker
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None

    async def _handle_health(self, request: web.Request) -> web.Response:
        report = await self._checker.check_all()
        status_code = 503 if report.status == ServiceStatus.UNHEALTHY else 200
        logger.debug("health_check", status=report.status.value)
        return web.json_response(report.to_dict(), status=status_code)

    async def _handle_live(self, request: web.Request) -> web.Response:
        return web.json_response({"alive": True})

    async def start(self) -> None:
        """Start the health server."""
        app = web.Application()
        app.router.add_get("/health", self._handle_health)
        app.router.add_get("/live", self._handle_live)

        self._runner = web.AppRunner(app)
        await self._runner.setup()
        await web.TCPSite(self._runner, self._host, self._port).start()
        logger.info("health_server_started", host=self._host, port=self._port)

    async def stop(self) -> None:
        """Stop the health server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("health_server_stopped")


async def start_health_server(
    checker: HealthChecker, host: str = "0.0.0.0", port: int = 8080
) -> HealthServer:
    """Start a health check HTTP server and return it."""
    server = HealthServer(checker, host, port)
    await server.start()
    return server
