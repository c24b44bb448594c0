from typing import Annotated, Any
import logging

from mcp.types import CallToolResult
from pydantic import Field

from core.accounts import get_client  # type: ignore
from tools._schema import ContactFieldDefinition, DataType, LocationId  # type: ignore
from utils import error, success, to_json  # type: ignore

logger = logging.getLogger(__name__)


async def list_contact_custom_fields(location_id: LocationId = None) -> CallToolResult:
    """List all contact-level custom fields of the location."""
    try:
        client = await get_client(location_id)
        result = await client.get_location_custom_fields()
        return success(data=result)
    except Exception as e:
        return error(e, logger)


async def get_contact_custom_field(
    field_id: Annotated[str, Field(description="The custom field ID")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.get_location_custom_field(field_id)
        return success(data=result)
    except Exception as e:
        return error(e, logger)


async def create_contact_custom_field(
    name: Annotated[str, Field(description="Display name for the field")],
    data_type: Annotated[DataType, Field(description="The field data type")],
    placeholder: Annotated[str | None, Field(description="Placeholder text shown in the field")] = None,
    position: Annotated[int | None, Field(description="Position/order of the field")] = None,
    options: Annotated[
        list[str] | None,
        Field(description="Options for selection-type fields (SINGLE_OPTIONS, MULTIPLE_OPTIONS, RADIO, CHECKBOX)"),
    ] = None,
    accepted_format: Annotated[list[str] | None, Field(description="Accepted file formats for FILE_UPLOAD fields")] = None,
    is_multiple_file: Annotated[bool | None, Field(description="Allow multiple files for FILE_UPLOAD")] = None,
    max_number_of_files: Annotated[int | None, Field(description="Max files for FILE_UPLOAD")] = None,
    is_required: Annotated[bool | None, Field(description="Whether the field is required")] = None,
    model: Annotated[str | None, Field(description="Model to attach the field to (e.g. 'contact', 'opportunity')")] = None,
    location_id: LocationId = None,
) -> CallToolResult:
    """Create a contact-level custom field."""
    payload = {
        "name": name,
        "dataType": data_type,
        "placeholder": placeholder,
        "position": position,
        "options": options,
        "acceptedFormat": accepted_format,
        "isMultipleFile": is_multiple_file,
        "maxNumberOfFiles": max_number_of_files,
        "isRequired": is_required,
        "model": model,
    }
    try:
        client = await get_client(location_id)
        result = await client.create_location_custom_field(payload)
        return success(f'Custom field "{name}" created successfully!', result)
    except Exception as e:
        return error(e, logger)


async def update_contact_custom_field(
    field_id: Annotated[str, Field(description="The custom field ID to update")],
    name: Annotated[str | None, Field(description="New display name")] = None,
    placeholder: Annotated[str | None, Field(description="New placeholder text")] = None,
    position: Annotated[int | None, Field(description="New position/order")] = None,
    options: Annotated[
        list[str] | None, Field(description="Updated options (replaces existing options entirely)")
    ] = None,
    is_required: bool | None = None,
    location_id: LocationId = None,
) -> CallToolResult:
    payload = {
        "name": name,
        "placeholder": placeholder,
        "position": position,
        "options": options,
        "isRequired": is_required,
    }
    try:
        client = await get_client(location_id)
        result = await client.update_location_custom_field(field_id, payload)
        return success("Custom field updated successfully!", result)
    except Exception as e:
        return error(e, logger)


async def delete_contact_custom_field(
    field_id: Annotated[str, Field(description="The custom field ID to delete")],
    location_id: LocationId = None,
) -> CallToolResult:
    try:
        client = await get_client(location_id)
        result = await client.delete_location_custom_field(field_id)
        return success("Custom field deleted.", result)
    except Exception as e:
        return error(e, logger)


async def bulk_create_contact_custom_fields(
    fields: Annotated[list[ContactFieldDefinition], Field(description="Array of field definitions to create")],
    location_id: LocationId = None,
) -> CallToolResult:
    """Create several contact fields one after another.

    A failing item is recorded with its error message and does not stop the
    remaining items.
    """
    try:
        client = await get_client(location_id)
    except Exception as e:
        return error(e, logger)

    results: list[dict[str, Any]] = []
    for field in fields:
        payload = {
            "name": field.name,
            "dataType": field.data_type,
            "placeholder": field.placeholder,
            "options": field.options,
            "isRequired": field.is_required,
            "model": field.model,
        }
        try:
            result = await client.create_location_custom_field(payload)
            results.append({"name": field.name, "success": True, "data": result})
        except Exception as e:
            logger.warning("Bulk create of field %r failed: %s", field.name, e)
            results.append({"name": field.name, "success": False, "error": str(e)})

    success_count = sum(1 for r in results if r["success"])
    fail_count = len(results) - success_count
    logger.info("Bulk create finished: %d succeeded, %d failed", success_count, fail_count)
    return success(f"Bulk create complete: {success_count} succeeded, {fail_count} failed.", results)


def get_tools() -> dict[str, Any]:
    return {
        "ghl_list_contact_custom_fields": {
            "func": list_contact_custom_fields,
            "title": "List contact custom fields",
            "description": "List all contact-level custom fields for your GHL location. Returns field names, types, IDs, and options.",
        },
        "ghl_get_contact_custom_field": {
            "func": get_contact_custom_field,
            "title": "Get contact custom field",
            "description": "Get details for a specific contact-level custom field by its ID.",
        },
        "ghl_create_contact_custom_field": {
            "func": create_contact_custom_field,
            "title": "Create contact custom field",
            "description": (
                "Create a new contact-level custom field in GHL. "
                "Supported data types: TEXT, LARGE_TEXT, NUMERICAL, PHONE, MONETORY, CHECKBOX, SINGLE_OPTIONS, "
                "MULTIPLE_OPTIONS, DATE, FILE_UPLOAD, RADIO, EMAIL, TEXTBOX_LIST. "
                "For option-based fields (SINGLE_OPTIONS, MULTIPLE_OPTIONS, RADIO, CHECKBOX), provide the options array."
            ),
        },
        "ghl_update_contact_custom_field": {
            "func": update_contact_custom_field,
            "title": "Update contact custom field",
            "description": "Update an existing contact-level custom field. You can change name, placeholder, options, etc.",
        },
        "ghl_delete_contact_custom_field": {
            "func": delete_contact_custom_field,
            "title": "Delete contact custom field",
            "description": (
                "Delete a contact-level custom field by ID. WARNING: This is permanent and removes all data "
                "stored in this field across all contacts."
            ),
        },
        "ghl_bulk_create_contact_custom_fields": {
            "func": bulk_create_contact_custom_fields,
            "title": "Bulk create contact custom fields",
            "description": (
                "Create multiple contact-level custom fields at once. Each field needs at minimum a name and a "
                "data_type. Useful when setting up many fields from a spreadsheet or document. "
                f"Example item: {to_json({'name': 'Pet Name', 'data_type': 'TEXT'})}"
            ),
        },
    }
