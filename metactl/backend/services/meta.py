"""
Meta Service.

Answers the Meta RPC procedures from the server's own configuration.

Usage:
    from metactl.backend.services.meta import MetaService

    service = MetaService(get_app_config(), started_at=utc_now())
    status = service.status()
    config = service.config()
"""

from datetime import datetime

from metactl.backend.core.config import AppConfig
from metactl.backend.core.logging import get_logger
from metactl.backend.schemas.base import utc_now
from metactl.backend.schemas.meta import ConfigResponse, StatusResponse

logger = get_logger(__name__)


def _format_uptime(seconds: int) -> str:
    """Render a duration as e.g. '2d 3h 4m 5s', dropping leading zero units."""
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    parts = [(days, "d"), (hours, "h"), (minutes, "m")]
    rendered = ""
    for value, unit in parts:
        if value or rendered:
            rendered += f"{value}{unit} "
    return f"{rendered}{secs}s"


class MetaService:
    """
    Server meta-information.

    The status line and the config payload are derived from application.yaml
    and the time the application started.
    """

    def __init__(self, app_config: AppConfig, started_at: datetime) -> None:
        self._app_config = app_config
        self._started_at = started_at

    def status(self) -> StatusResponse:
        """Human-readable status: identity, environment and uptime."""
        app = self._app_config.application
        uptime = int((utc_now() - self._started_at).total_seconds())
        info = (
            f"{app.name} {app.version} ({app.environment}) "
            f"up {_format_uptime(max(uptime, 0))}"
        )
        logger.debug("Meta status requested", source="api", uptime_seconds=uptime)
        return StatusResponse(info=info)

    def config(self) -> ConfigResponse:
        """Public configuration. An unset app_url is reported as empty."""
        app = self._app_config.application
        if not app.app_url:
            logger.warning("Meta config requested but app_url is not configured", source="api")
        return ConfigResponse(
            app_url=app.app_url,
            name=app.name,
            version=app.version,
            environment=app.environment,
        )
