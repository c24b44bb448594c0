"""Tests for the contact field, object field and custom value tools."""

import json

from conftest import FALLBACK_KEY, FALLBACK_LOCATION, result_text

from tools import contact_fields, custom_values, object_fields
from tools._schema import ContactFieldDefinition, ObjectFieldOption


class TestContactFields:
    """ghl_*_contact_custom_field* tools."""

    async def test_list_uses_default_account(self, registry, ghl_api):
        await registry.upsert("loc_default", "Default Co", "key-default", is_default=True)
        ghl_api.respond(200, {"customFields": [{"id": "f1", "name": "Pet"}]})

        result = await contact_fields.list_contact_custom_fields()

        assert not result.isError
        assert json.loads(result_text(result)) == {"customFields": [{"id": "f1", "name": "Pet"}]}
        assert ghl_api.last.url.path == "/locations/loc_default/customFields"
        assert ghl_api.last.headers["Authorization"] == "Bearer key-default"

    async def test_list_with_fallback(self, ghl_api):
        await contact_fields.list_contact_custom_fields()
        assert ghl_api.last.url.path == f"/locations/{FALLBACK_LOCATION}/customFields"
        assert ghl_api.last.headers["Authorization"] == f"Bearer {FALLBACK_KEY}"

    async def test_get_with_explicit_location(self, registry, ghl_api):
        await registry.upsert("loc_123", "Acme", "key-acme")
        await contact_fields.get_contact_custom_field("f1", location_id="loc_123")
        assert ghl_api.last.url.path == "/locations/loc_123/customFields/f1"
        assert ghl_api.last.headers["Authorization"] == "Bearer key-acme"

    async def test_create_maps_parameters(self, ghl_api):
        ghl_api.respond(200, {"customField": {"id": "new"}})

        result = await contact_fields.create_contact_custom_field(
            "Favourite Color", "SINGLE_OPTIONS", options=["Red", "Blue"], is_required=True
        )

        assert result_text(result).startswith('Custom field "Favourite Color" created successfully!')
        assert ghl_api.last.method == "POST"
        assert ghl_api.body() == {
            "name": "Favourite Color",
            "dataType": "SINGLE_OPTIONS",
            "options": ["Red", "Blue"],
            "isRequired": True,
        }

    async def test_upstream_error_becomes_error_result(self, ghl_api):
        ghl_api.respond(422, {"message": "duplicate fieldKey"})

        result = await contact_fields.create_contact_custom_field("Pet", "TEXT")

        assert result.isError
        text = result_text(result)
        assert text.startswith("Error: GHL API Error 422")
        assert "duplicate fieldKey" in text
        assert json.loads(text.split(" - ", 1)[1]) == {"message": "duplicate fieldKey"}

    async def test_update_and_delete(self, ghl_api):
        await contact_fields.update_contact_custom_field("f1", name="Renamed", position=3)
        assert ghl_api.last.method == "PUT"
        assert ghl_api.body() == {"name": "Renamed", "position": 3}

        result = await contact_fields.delete_contact_custom_field("f1")
        assert ghl_api.last.method == "DELETE"
        assert result_text(result).startswith("Custom field deleted.")


class TestBulkCreate:
    """ghl_bulk_create_contact_custom_fields."""

    async def test_partial_failure_is_isolated(self, ghl_api):
        ghl_api.respond(200, {"customField": {"id": "a"}})
        ghl_api.respond(422, {"message": "duplicate fieldKey"})
        ghl_api.respond(200, {"customField": {"id": "c"}})
        ghl_api.respond(400, {"message": "options required"})
        fields = [
            ContactFieldDefinition(name="A", data_type="TEXT"),
            ContactFieldDefinition(name="B", data_type="TEXT"),
            ContactFieldDefinition(name="C", data_type="DATE"),
            ContactFieldDefinition(name="D", data_type="RADIO"),
        ]

        result = await contact_fields.bulk_create_contact_custom_fields(fields)

        assert not result.isError
        summary, _, payload = result_text(result).partition("\n\n")
        assert summary == "Bulk create complete: 2 succeeded, 2 failed."
        items = json.loads(payload)
        assert [i["success"] for i in items] == [True, False, True, False]
        assert items[1]["error"].startswith("GHL API Error 422")
        assert "duplicate fieldKey" in items[1]["error"]
        assert "options required" in items[3]["error"]
        assert items[0]["data"] == {"customField": {"id": "a"}}
        assert len(ghl_api.requests) == 4

    async def test_sends_items_in_order(self, ghl_api):
        fields = [ContactFieldDefinition(name=f"F{i}", data_type="TEXT", model="contact") for i in range(3)]
        await contact_fields.bulk_create_contact_custom_fields(fields)
        assert [ghl_api.body(i)["name"] for i in range(3)] == ["F0", "F1", "F2"]
        assert ghl_api.body(0)["model"] == "contact"


class TestObjectFields:
    """ghl_*_object_custom_field and folder tools."""

    async def test_list_by_object_key(self, ghl_api):
        ghl_api.respond(200, {"fields": [], "folders": [{"id": "fo1"}]})
        result = await object_fields.list_object_custom_fields("custom_objects.pet")
        assert json.loads(result_text(result))["folders"] == [{"id": "fo1"}]
        assert ghl_api.last.url.path == "/custom-fields/object-key/custom_objects.pet"
        assert ghl_api.last.url.params["locationId"] == FALLBACK_LOCATION

    async def test_create_object_field(self, ghl_api):
        await object_fields.create_object_custom_field(
            "custom_objects.pet",
            "custom_objects.pet.breed",
            "fo1",
            "SINGLE_OPTIONS",
            name="Breed",
            options=[ObjectFieldOption(key="lab", label="Labrador")],
        )
        assert ghl_api.body() == {
            "objectKey": "custom_objects.pet",
            "fieldKey": "custom_objects.pet.breed",
            "parentId": "fo1",
            "name": "Breed",
            "showInForms": False,
            "dataType": "SINGLE_OPTIONS",
            "options": [{"key": "lab", "label": "Labrador"}],
            "locationId": FALLBACK_LOCATION,
        }

    async def test_get_update_delete(self, ghl_api):
        await object_fields.get_object_custom_field("f1")
        assert ghl_api.last.url.path == "/custom-fields/f1"
        await object_fields.update_object_custom_field("f1", name="Size", show_in_forms=True)
        assert ghl_api.last.method == "PUT"
        assert ghl_api.body()["showInForms"] is True
        await object_fields.delete_object_custom_field("f1")
        assert ghl_api.last.method == "DELETE"

    async def test_rename_leaves_form_visibility_alone(self, ghl_api):
        """An update without show_in_forms does not send showInForms."""
        await object_fields.update_object_custom_field("f1", name="Renamed only")
        assert ghl_api.body() == {"name": "Renamed only", "locationId": FALLBACK_LOCATION}

    async def test_folders(self, registry, ghl_api):
        await registry.upsert("loc_123", "Acme", "key-acme")
        result = await object_fields.create_custom_field_folder("company", "Main", location_id="loc_123")
        assert result_text(result).startswith('Folder "Main" created!')
        assert ghl_api.body() == {"objectKey": "company", "name": "Main", "locationId": "loc_123"}

        await object_fields.update_custom_field_folder("fo1", "Renamed", location_id="loc_123")
        assert ghl_api.last.url.path == "/custom-fields/folder/fo1"

        await object_fields.delete_custom_field_folder("fo1", location_id="loc_123")
        assert ghl_api.last.url.params["locationId"] == "loc_123"
        assert ghl_api.last.headers["Authorization"] == "Bearer key-acme"

    async def test_error(self, ghl_api):
        ghl_api.respond(404, {"message": "Not found"})
        result = await object_fields.get_object_custom_field("missing")
        assert result.isError
        assert "404" in result_text(result)


class TestCustomValues:
    """ghl_*_custom_value tools."""

    async def test_crud(self, ghl_api):
        await custom_values.list_custom_values()
        assert ghl_api.last.url.path == f"/locations/{FALLBACK_LOCATION}/customValues"

        result = await custom_values.create_custom_value("company_name", "Acme")
        assert result_text(result).startswith('Custom value "company_name" created!')
        assert ghl_api.body() == {"name": "company_name", "value": "Acme"}

        await custom_values.get_custom_value("v1")
        assert ghl_api.last.url.path == f"/locations/{FALLBACK_LOCATION}/customValues/v1"

        await custom_values.update_custom_value("v1", value="Acme Inc")
        assert ghl_api.body() == {"value": "Acme Inc"}

        result = await custom_values.delete_custom_value("v1")
        assert ghl_api.last.method == "DELETE"
        assert not result.isError

    async def test_error(self, ghl_api):
        ghl_api.respond(401, {"message": "Invalid JWT"})
        result = await custom_values.list_custom_values()
        assert result.isError
        assert "401" in result_text(result)
        assert "Invalid JWT" in result_text(result)
