"""Tests for form field extraction and default synthesis."""

from datetime import date

from bridge_tools.adapters.n8n.forms import (
    extract_form_fields,
    generate_default_form_data,
    merge_form_data,
)


def form_node(*fields):
    return {
        "type": "n8n-nodes-base.formTrigger",
        "name": "On form submission",
        "parameters": {"formFields": {"values": list(fields)}},
    }


def test_three_typed_fields_get_positional_values():
    node = form_node(
        {"fieldLabel": "Full Name", "fieldType": "text"},
        {"fieldLabel": "Contact", "fieldType": "email"},
        {"fieldLabel": "Seats", "fieldType": "number"},
    )

    data = generate_default_form_data(node, {"name": "Signup"})

    assert set(data) == {"field-0", "field-1", "field-2"}
    assert all(value is not None for value in data.values())
    assert "@" in data["field-1"]
    assert data["field-0"] == "John Doe"
    assert data["field-2"] == 1


def test_declared_defaults_are_used_verbatim():
    node = form_node(
        {"fieldLabel": "Plan", "fieldType": "text", "defaultValue": "pro"},
        {"fieldLabel": "Seats", "fieldType": "number", "min": 5},
    )

    data = generate_default_form_data(node)

    assert data == {"field-0": "pro", "field-1": 5}


def test_typed_defaults():
    node = form_node(
        {"fieldLabel": "Opt in", "fieldType": "checkbox"},
        {"fieldLabel": "Start", "fieldType": "date"},
        {"fieldLabel": "Size", "fieldType": "dropdown", "fieldOptions": {"values": [{"option": "S"}, {"option": "M"}]}},
        {"fieldLabel": "Colors", "fieldType": "multiselect", "options": ["red", "blue"]},
        {"fieldLabel": "Work email", "fieldType": "text", "placeholder": "name"},
    )

    data = generate_default_form_data(node)

    assert data["field-0"] is True
    assert data["field-1"] == date.today().isoformat()
    assert data["field-2"] == "S"
    assert data["field-3"] == ["red"]
    assert data["field-4"] == "user@example.com"


def test_no_fields_yields_message_and_timestamp():
    data = generate_default_form_data(form_node(), {"name": "Feedback"})

    assert set(data) == {"message", "timestamp"}
    assert "Feedback" in data["message"]


def test_fields_from_schema_properties():
    node = {
        "type": "n8n-nodes-base.formTrigger",
        "parameters": {"schema": {"properties": {"email": {"type": "email"}, "age": {"type": "integer", "minimum": 18}}}},
    }

    fields = extract_form_fields(node)

    assert [f.field_label for f in fields] == ["email", "age"]
    assert generate_default_form_data(node) == {"field-0": "user@example.com", "field-1": 18}


def test_fields_fall_back_to_published_version():
    published = form_node({"fieldLabel": "Company", "fieldType": "text"})
    workflow = {"activeVersion": {"nodes": [published]}}

    fields = extract_form_fields(form_node(), workflow)

    assert len(fields) == 1
    assert fields[0].field_label == "Company"


def test_merge_treats_empty_string_as_absent():
    defaults = {"field-0": "default-a", "field-1": "default-b"}

    merged, used_defaults = merge_form_data(defaults, {"field-0": "", "field-1": "x"})

    assert merged == {"field-0": "default-a", "field-1": "x"}
    assert used_defaults is True


def test_merge_with_every_field_provided():
    merged, used_defaults = merge_form_data({"field-0": "a"}, {"field-0": "b", "extra": None})

    assert merged == {"field-0": "b"}
    assert used_defaults is False


def test_merge_ignores_non_mapping_input():
    merged, used_defaults = merge_form_data({"field-0": "a"}, "free text")

    assert merged == {"field-0": "a"}
    assert used_defaults is True


def test_choice_field_without_options():
    node = form_node(
        {"fieldLabel": "Size", "fieldType": "dropdown"},
        {"fieldLabel": "Tier", "fieldType": "radio", "placeholder": "basic"},
    )

    assert generate_default_form_data(node) == {"field-0": "Default value", "field-1": "basic"}
