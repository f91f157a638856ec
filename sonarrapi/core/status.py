"""
Service status checks.

Reports whether Sonarr is configured and reachable by asking the health
endpoint for its current issues.
"""

from typing import Any

import httpx

from ..clients.sonarr import SonarrClient, health_request
from ..config import Settings
from ..utils.logging import generate_correlation_id, operation_logger


async def check_service_status(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    correlation_id: str | None = None,
) -> dict[str, Any]:
    """Check whether Sonarr is configured and answering API requests."""
    correlation_id = correlation_id or generate_correlation_id()

    status: dict[str, Any] = {
        "configured": settings.is_configured,
        "accessible": False,
        "status_code": None,
        "error_category": None,
        "error": None,
        "error_details": None,
        "health_issues": [],
    }

    with operation_logger("service_status_check", correlation_id) as op_logger:
        if not status["configured"]:
            op_logger.debug(
                "Sonarr not configured, skipping accessibility check",
                missing=settings.missing_keys(),
            )
            return status

        sonarr = SonarrClient(settings, client=client, logger=op_logger)
        result = await sonarr.request(health_request())

        if result.ok:
            status["accessible"] = True
            status["health_issues"] = result.data if isinstance(result.data, list) else []
        else:
            status["status_code"] = result.status_code
            status["error_category"] = result.category.value
            status["error"] = result.error.message
            status["error_details"] = result.error.to_dict()

        op_logger.info(
            "Sonarr status checked",
            accessible=status["accessible"],
            health_issue_count=len(status["health_issues"]),
        )

    return status
