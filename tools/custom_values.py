from typing import Annotated, Any
import logging

from mcp.types import CallToolResult
from pydantic import Field

from core.accounts import get_client  # type: ignore
from tools._schema import LocationId  # type: ignore
from utils import error, success  # type: ignore

logger = logging.getLogger(__name__)


async def list_custom_values(location_id: LocationId = None) -> CallToolResult:
    """List the location-wide custom values (company name, address, ...)."""
    try:
        client = await get_client(location_id)
        result = await client.get_custom_values()
        return success(data=result)
    except Exception as e:
        return error(e, logger)


async def get_custom_value(
    value_id: Annotated[str, Field(description="The custom value ID")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.get_custom_value(value_id)
        return success(data=result)
    except Exception as e:
        return error(e, logger)


async def create_custom_value(
    name: Annotated[str, Field(description="Variable name")],
    value: Annotated[str, Field(description="Variable value")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.create_custom_value({"name": name, "value": value})
        return success(f'Custom value "{name}" created!', result)
    except Exception as e:
        return error(e, logger)


async def update_custom_value(
    value_id: Annotated[str, Field(description="The custom value ID")],
    name: str | None = None,
    value: str | None = None,
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.update_custom_value(value_id, {"name": name, "value": value})
        return success("Custom value updated!", result)
    except Exception as e:
        return error(e, logger)


async def delete_custom_value(
    value_id: Annotated[str, Field(description="The custom value ID to delete")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.delete_custom_value(value_id)
        return success("Custom value deleted.", result)
    except Exception as e:
        return error(e, logger)


def get_tools() -> dict[str, Any]:
    return {
        "ghl_list_custom_values": {
            "func": list_custom_values,
            "title": "List custom values",
            "description": "List all reusable custom values for your GHL location. These are location-wide variables like company name, address, etc.",
        },
        "ghl_get_custom_value": {
            "func": get_custom_value,
            "title": "Get custom value",
            "description": "Get a single custom value by its ID.",
        },
        "ghl_create_custom_value": {
            "func": create_custom_value,
            "title": "Create custom value",
            "description": "Create a new reusable custom value (location-wide variable).",
        },
        "ghl_update_custom_value": {
            "func": update_custom_value,
            "title": "Update custom value",
            "description": "Update the name and/or value of an existing custom value.",
        },
        "ghl_delete_custom_value": {
            "func": delete_custom_value,
            "title": "Delete custom value",
            "description": "Delete a custom value by ID.",
        },
    }
