from typing import Annotated, Any
import logging

from mcp.types import CallToolResult
from pydantic import Field

from core.accounts import fallback_account, get_registry  # type: ignore
from core.exceptions import AccountNotFoundError  # type: ignore
from tools._schema import AccountType  # type: ignore
from utils import error, mask_secret, success  # type: ignore

logger = logging.getLogger(__name__)


def _public(account: dict[str, Any]) -> dict[str, Any]:
    """Account record safe to show to the agent (token masked)."""
    return {**account, "api_key": mask_secret(account.get("api_key"))}


def _format_account(account: dict[str, Any]) -> str:
    lines = [
        f"- {account['name']} ({account['id']}) [{account.get('account_type') or 'sub_account'}] "
        f"default={'YES' if account.get('is_default') else 'NO'}",
        f"  token: {mask_secret(account.get('api_key'))}",
    ]
    if account.get("notes"):
        lines.append(f"  notes: {account['notes']}")
    lines.append(f"  updated: {account.get('updated_at')}")
    return "\n".join(lines)


async def register_account(
    location_id: Annotated[str, Field(description="GHL location ID of the sub-account (or agency)")],
    name: Annotated[str, Field(description='Friendly name, e.g. "Dr. Smith Dental"')],
    api_key: Annotated[str, Field(description="Private Integration Token for this location")],
    account_type: Annotated[AccountType, Field(description="'agency' or 'sub_account'")] = "sub_account",
    is_default: Annotated[bool, Field(description="Use this account when no location_id is given")] = False,
    notes: Annotated[str | None, Field(description="Optional notes about this account")] = None,
) -> CallToolResult:
    """Register (or overwrite) an account in the local registry."""
    try:
        registry = await get_registry()
        existing = await registry.get(location_id)
        account = await registry.upsert(location_id, name, api_key, account_type, is_default, notes)
        verb = "updated" if existing else "registered"
        return success(f'Account "{name}" ({location_id}) {verb}.', _public(account))
    except Exception as e:
        return error(e, logger)


async def list_accounts() -> CallToolResult:
    """List registered accounts with masked tokens."""
    try:
        registry = await get_registry()
        accounts = await registry.list_all()
    except Exception as e:
        return error(e, logger)

    if not accounts:
        fallback = fallback_account()
        text = "No accounts registered."
        if fallback.location_id:
            text += f" Calls without location_id use the configured location {fallback.location_id}."
        return success(text)

    body = "\n".join(_format_account(a) for a in accounts)
    return success(f"Registered accounts ({len(accounts)}):\n\n{body}")


async def set_default_account(
    location_id: Annotated[str | None, Field(description="Location ID of the account to make default")] = None,
    name: Annotated[str | None, Field(description="Account name or part of it (case-insensitive)")] = None,
) -> CallToolResult:
    """Make one registered account the default, picked by id or by name."""
    if not location_id and not name:
        return error("Provide either location_id or name.", logger)
    try:
        registry = await get_registry()
        if not location_id:
            matches = await registry.find_by_name(name)
            exact = [m for m in matches if m["name"].lower() == name.lower()]
            if len(exact) == 1:
                matches = exact
            if not matches:
                raise AccountNotFoundError(f"No registered account matches name '{name}'")
            if len(matches) > 1:
                listing = "\n".join(f"- {m['name']} ({m['id']})" for m in matches)
                return error(f"Multiple accounts match '{name}', use location_id instead:\n{listing}", logger)
            location_id = matches[0]["id"]
        account = await registry.set_default(location_id)
        return success(f'Default account is now "{account["name"]}" ({location_id}).', _public(account))
    except Exception as e:
        return error(e, logger)


async def remove_account(
    location_id: Annotated[str, Field(description="Location ID of the account to forget")],
) -> CallToolResult:
    """Forget an account's local credentials. Nothing is deleted in GHL."""
    try:
        registry = await get_registry()
        if not await registry.delete(location_id):
            raise AccountNotFoundError(f"No registered account found for location '{location_id}'")
        return success(f"Account {location_id} removed from the registry.")
    except Exception as e:
        return error(e, logger)


async def update_account_token(
    location_id: Annotated[str, Field(description="Location ID of the registered account")],
    api_key: Annotated[str, Field(description="New Private Integration Token")],
) -> CallToolResult:
    try:
        registry = await get_registry()
        account = await registry.rotate_api_key(location_id, api_key)
        return success(f"Token updated for {account['name']} ({location_id}).", _public(account))
    except Exception as e:
        return error(e, logger)


def get_tools() -> dict[str, Any]:
    return {
        "ghl_register_account": {
            "func": register_account,
            "title": "Register account",
            "description": (
                "Register a GHL sub-account (or the agency) with its Private Integration Token so other tools can "
                "target it via location_id. Registering an existing location_id overwrites it."
            ),
        },
        "ghl_list_accounts": {
            "func": list_accounts,
            "title": "List accounts",
            "description": "List registered GHL accounts with masked tokens and which one is the default.",
        },
        "ghl_set_default_account": {
            "func": set_default_account,
            "title": "Set default account",
            "description": "Choose the account used when a tool call omits location_id, by location_id or (partial) name.",
        },
        "ghl_remove_account": {
            "func": remove_account,
            "title": "Remove account",
            "description": "Remove an account from the local registry. Only the stored token is forgotten; nothing changes in GHL.",
        },
        "ghl_update_account_token": {
            "func": update_account_token,
            "title": "Update account token",
            "description": "Replace the stored Private Integration Token of a registered account (token rotation).",
        },
    }
