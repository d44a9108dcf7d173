"""Health-check payload."""

from datetime import datetime, timezone


def get_health(environment: str) -> dict:
    """Return the static status block served by /api/health."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc),
        "environment": environment,
    }
