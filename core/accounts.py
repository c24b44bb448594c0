"""Credential/location resolution for multi-account GHL access.

Resolution order (first match wins):

1. explicit ``location_id`` that is registered: its stored token
2. explicit ``location_id`` that is not registered: fallback token + that id
3. no ``location_id``: the registered default account
4. otherwise: fallback token + fallback location id

Nothing is cached; the registry is re-read on every call.
"""

import logging
from dataclasses import dataclass

from core.config import get_config, resolve_path
from core.ghl_client import GHLClient
from core.registry import AccountRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedAccount:
    api_key: str
    location_id: str
    source: str
    name: str | None = None


async def get_registry() -> AccountRegistry:
    """Registry at the configured path, with its schema created if missing."""
    cfg = get_config()
    registry = AccountRegistry(resolve_path(cfg.get("registry_db_path") or "~/.ghl-mcp/registry.db"))
    await registry.ensure_schema()
    return registry


def fallback_account() -> ResolvedAccount:
    cfg = get_config()
    return ResolvedAccount(
        api_key=cfg.get("fallback_api_key") or "",
        location_id=cfg.get("fallback_location_id") or "",
        source="fallback",
    )


async def resolve_account(location_id: str | None = None) -> ResolvedAccount:
    registry = await get_registry()
    fallback = fallback_account()

    if location_id:
        account = await registry.get(location_id)
        if account:
            resolved = ResolvedAccount(account["api_key"], account["id"], "registry", account["name"])
        else:
            resolved = ResolvedAccount(fallback.api_key, location_id, "fallback_key")
    else:
        account = await registry.get_default()
        if account:
            resolved = ResolvedAccount(account["api_key"], account["id"], "default", account["name"])
        else:
            resolved = fallback

    logger.info("Resolved location %s via %s", resolved.location_id or "<none>", resolved.source)
    return resolved


async def get_client(location_id: str | None = None) -> GHLClient:
    """Resolve the account for ``location_id`` and build a client bound to it."""
    account = await resolve_account(location_id)
    cfg = get_config()
    return GHLClient(
        api_key=account.api_key,
        location_id=account.location_id,
        base_url=cfg.get("ghl_api_url") or "https://services.leadconnectorhq.com",
        api_version=cfg.get("api_version") or "2021-07-28",
        timeout=float(cfg.get("request_timeout") or 30.0),
    )
