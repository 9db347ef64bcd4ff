"""Calendar helpers that depend on a tenant's timezone."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from arkelium.config import get_settings

if TYPE_CHECKING:
    from arkelium.gateway import TenantGateway

logger = logging.getLogger(__name__)


def local_today(timezone_name: str | None = None) -> date:
    """Return today's date in the given IANA timezone.

    Unknown names fall back to the configured default timezone.
    """
    name = timezone_name or get_settings().default_timezone
    try:
        tz = ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using %s", name, get_settings().default_timezone)
        tz = ZoneInfo(get_settings().default_timezone)
    return datetime.now(tz).date()


async def tenant_today(gateway: TenantGateway) -> date:
    """Today's date in the gateway tenant's timezone."""
    return local_today(await gateway.call("tenant_timezone"))
