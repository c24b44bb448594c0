from typing import Annotated, Any
import logging

from mcp.types import CallToolResult
from pydantic import Field

from core.accounts import get_client  # type: ignore
from tools._schema import DataType, LocationId, ObjectFieldOption  # type: ignore
from utils import error, success  # type: ignore

logger = logging.getLogger(__name__)

ObjectKey = Annotated[str, Field(description='The object key, e.g. "custom_objects.pet" or "company"')]


def _options_payload(options: list[ObjectFieldOption] | None) -> list[dict[str, Any]] | None:
    if options is None:
        return None
    return [opt.model_dump(exclude_none=True) for opt in options]


async def list_object_custom_fields(object_key: ObjectKey, location_id: LocationId = None) -> CallToolResult:
    """List fields and folders of a custom object or company."""
    try:
        client = await get_client(location_id)
        result = await client.get_custom_fields_by_object_key(object_key)
        return success(data=result)
    except Exception as e:
        return error(e, logger)


async def get_object_custom_field(
    field_id: Annotated[str, Field(description="The custom field or folder ID")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.get_custom_field_by_id(field_id)
        return success(data=result)
    except Exception as e:
        return error(e, logger)


async def create_object_custom_field(
    object_key: Annotated[str, Field(description='e.g. "custom_objects.pet"')],
    field_key: Annotated[str, Field(description='e.g. "custom_objects.pet.name"')],
    parent_id: Annotated[str, Field(description="ID of the parent folder")],
    data_type: Annotated[DataType, Field(description="Field type")],
    name: Annotated[str | None, Field(description="Display name")] = None,
    description: str | None = None,
    placeholder: str | None = None,
    show_in_forms: bool = False,
    options: list[ObjectFieldOption] | None = None,
    location_id: LocationId = None,
) -> CallToolResult:
    """Create a custom field on a custom object or company."""
    payload = {
        "objectKey": object_key,
        "fieldKey": field_key,
        "parentId": parent_id,
        "name": name,
        "description": description,
        "placeholder": placeholder,
        "showInForms": show_in_forms,
        "dataType": data_type,
        "options": _options_payload(options),
    }
    try:
        client = await get_client(location_id)
        result = await client.create_custom_field(payload)
        return success("Object custom field created!", result)
    except Exception as e:
        return error(e, logger)


async def update_object_custom_field(
    field_id: Annotated[str, Field(description="The custom field ID to update")],
    name: str | None = None,
    description: str | None = None,
    placeholder: str | None = None,
    show_in_forms: Annotated[bool | None, Field(description="Show the field in forms (unchanged if omitted)")] = None,
    options: Annotated[
        list[ObjectFieldOption] | None, Field(description="Updated options (replaces existing options entirely)")
    ] = None,
    location_id: LocationId = None,
) -> CallToolResult:
    payload = {
        "name": name,
        "description": description,
        "placeholder": placeholder,
        "showInForms": show_in_forms,
        "options": _options_payload(options),
    }
    try:
        client = await get_client(location_id)
        result = await client.update_custom_field(field_id, payload)
        return success("Object custom field updated!", result)
    except Exception as e:
        return error(e, logger)


async def delete_object_custom_field(
    field_id: Annotated[str, Field(description="The custom field ID to delete")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.delete_custom_field(field_id)
        return success("Object custom field deleted.", result)
    except Exception as e:
        return error(e, logger)


async def create_custom_field_folder(
    object_key: ObjectKey,
    name: Annotated[str, Field(description="Folder name")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.create_custom_field_folder({"objectKey": object_key, "name": name})
        return success(f'Folder "{name}" created!', result)
    except Exception as e:
        return error(e, logger)


async def update_custom_field_folder(
    folder_id: Annotated[str, Field(description="The folder ID")],
    name: Annotated[str, Field(description="New folder name")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.update_custom_field_folder(folder_id, {"name": name})
        return success(f'Folder renamed to "{name}".', result)
    except Exception as e:
        return error(e, logger)


async def delete_custom_field_folder(
    folder_id: Annotated[str, Field(description="The folder ID to delete")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.delete_custom_field_folder(folder_id)
        return success("Folder deleted.", result)
    except Exception as e:
        return error(e, logger)


def get_tools() -> dict[str, Any]:
    return {
        "ghl_list_object_custom_fields": {
            "func": list_object_custom_fields,
            "title": "List object custom fields",
            "description": (
                "List custom fields for a custom object or company. Use object_key like "
                '"custom_objects.pet" for custom objects, or "company" for business fields.'
            ),
        },
        "ghl_get_object_custom_field": {
            "func": get_object_custom_field,
            "title": "Get object custom field",
            "description": "Get a single custom-object/company custom field or folder by its ID.",
        },
        "ghl_create_object_custom_field": {
            "func": create_object_custom_field,
            "title": "Create object custom field",
            "description": (
                "Create a custom field on a custom object or company. Requires object_key "
                '(e.g. "custom_objects.pet"), field_key (e.g. "custom_objects.pet.name") and parent_id (folder ID).'
            ),
        },
        "ghl_update_object_custom_field": {
            "func": update_object_custom_field,
            "title": "Update object custom field",
            "description": "Update name, description, placeholder, form visibility or options of a custom-object/company field.",
        },
        "ghl_delete_object_custom_field": {
            "func": delete_object_custom_field,
            "title": "Delete object custom field",
            "description": "Delete a custom-object/company custom field by ID. WARNING: This is permanent.",
        },
        "ghl_create_custom_field_folder": {
            "func": create_custom_field_folder,
            "title": "Create custom field folder",
            "description": "Create a folder to organize custom fields within a custom object or company.",
        },
        "ghl_update_custom_field_folder": {
            "func": update_custom_field_folder,
            "title": "Rename custom field folder",
            "description": "Rename a custom field folder of a custom object or company.",
        },
        "ghl_delete_custom_field_folder": {
            "func": delete_custom_field_folder,
            "title": "Delete custom field folder",
            "description": "Delete a custom field folder of a custom object or company.",
        },
    }
