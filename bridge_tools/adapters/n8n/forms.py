"""Form trigger field extraction and default value synthesis.

n8n form submissions address fields by position (``field-0``,
``field-1``, ...), not by label. Labels only drive the heuristics that
pick a plausible value when the caller sends no form data.
"""

from datetime import date, datetime, timezone
from typing import Any

from .schemas import FormField
from .triggers import active_version_trigger, dig

EXAMPLE_EMAIL = "user@example.com"


def _option_value(option: Any) -> Any:
    if isinstance(option, dict):
        return option.get("value") or option.get("label") or option.get("option") or option
    return option


def _to_form_field(raw: Any, label: str = "") -> FormField | None:
    if not isinstance(raw, dict):
        return None

    default_value = raw.get("defaultValue")
    if default_value is None:
        default_value = raw.get("default")

    options = (
        raw.get("options")
        or raw.get("values")
        or dig(raw, "fieldOptions", "values")
        or raw.get("enum")
        or []
    )

    return FormField(
        field_label=str(
            raw.get("fieldLabel")
            or raw.get("label")
            or raw.get("title")
            or raw.get("description")
            or label
        ),
        placeholder=str(raw.get("placeholder") or ""),
        required_field=raw.get("requiredField") is not False,
        field_type=str(raw.get("fieldType") or raw.get("type") or "text"),
        default_value=default_value,
        options=options if isinstance(options, list) else [],
        min=raw.get("min", raw.get("minimum")),
    )


def _from_list(raw_fields: Any) -> list[FormField]:
    if not isinstance(raw_fields, list):
        return []
    return [f for f in (_to_form_field(raw) for raw in raw_fields) if f is not None]


def _from_schema(properties: Any) -> list[FormField]:
    if not isinstance(properties, dict):
        return []
    return [
        f
        for f in (_to_form_field(prop, label=key) for key, prop in properties.items())
        if f is not None
    ]


def _fields_from_node(node: dict[str, Any] | None) -> list[FormField]:
    if not node:
        return []

    sources = (
        lambda: _from_list(dig(node, "parameters", "formFields", "values")),
        lambda: _from_list(dig(node, "parameters", "fields")),
        lambda: _from_list(dig(node, "parameters", "options", "fields")),
        lambda: _from_schema(dig(node, "parameters", "schema", "properties")),
        lambda: _from_schema(dig(node, "parameters", "schema", "items", "properties")),
    )
    for source in sources:
        fields = source()
        if fields:
            return fields
    return []


def extract_form_fields(
    form_trigger_node: dict[str, Any] | None,
    workflow: dict[str, Any] | None = None,
) -> list[FormField]:
    """Fields declared on a form trigger.

    Falls back to the published version's trigger when the node itself
    declares nothing.
    """
    fields = _fields_from_node(form_trigger_node)
    if not fields and workflow:
        fields = _fields_from_node(active_version_trigger(workflow))
    return fields


def _text_value(field: FormField, workflow_name: str, now: datetime) -> str:
    label = field.field_label.lower()
    placeholder = field.placeholder

    if "name" in label or "title" in label:
        if "form" in label or "form" in placeholder.lower():
            return f"Form submitted via n8n-bridge - {now.strftime('%Y-%m-%d %H:%M:%S')}"
        if "workflow" in label:
            return workflow_name or "n8n Workflow"
        return placeholder or "John Doe"
    if "email" in label:
        return placeholder if "@" in placeholder else EXAMPLE_EMAIL
    if "company" in label or "organization" in label:
        return placeholder or "Acme Corporation"
    if "message" in label or "comment" in label or "description" in label:
        return placeholder or (
            f"Automated submission from n8n-bridge for workflow: {workflow_name or 'workflow'}"
        )
    if "subject" in label or "topic" in label:
        return placeholder or f"Form Submission - {workflow_name or 'n8n Workflow'}"
    return placeholder or "Sample text"


def synthesize_value(field: FormField, workflow_name: str = "", now: datetime | None = None) -> Any:
    """Plausible value for one field when no default is declared."""
    now = now or datetime.now(timezone.utc)
    field_type = field.field_type.lower()
    placeholder = field.placeholder

    if field_type in ("text", "string"):
        return _text_value(field, workflow_name, now)
    if field_type == "textarea":
        return placeholder or (
            "Automated form submission from n8n-bridge.\n"
            f"Workflow: {workflow_name or 'Unknown'}\n"
            f"Timestamp: {now.isoformat()}"
        )
    if field_type == "email":
        return placeholder if "@" in placeholder else EXAMPLE_EMAIL
    if field_type in ("number", "integer"):
        return field.min if field.min is not None else 1
    if field_type in ("boolean", "checkbox"):
        return True
    if field_type == "date":
        return date.today().isoformat()
    if field_type in ("select", "dropdown", "radio"):
        if field.options:
            return _option_value(field.options[0])
        return placeholder or "Default value"
    if field_type == "multiselect":
        if field.options:
            return [_option_value(field.options[0])]
        return []
    return placeholder or "Default value"


def generate_default_form_data(
    form_trigger_node: dict[str, Any] | None,
    workflow: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Positional form payload (``field-N``) with a value for every field.

    Declared defaults are used verbatim. With no declared fields a generic
    ``message``/``timestamp`` payload is returned.
    """
    workflow = workflow or {}
    workflow_name = workflow.get("name") or ""
    now = datetime.now(timezone.utc)

    fields = extract_form_fields(form_trigger_node, workflow)
    if not fields:
        return {
            "message": f"Form submitted via n8n-bridge for workflow: {workflow_name or 'workflow'}",
            "timestamp": now.isoformat(),
        }

    data: dict[str, Any] = {}
    for index, field in enumerate(fields):
        key = f"field-{index}"
        if field.default_value is not None:
            data[key] = field.default_value
        else:
            data[key] = synthesize_value(field, workflow_name, now)
    return data


def merge_form_data(
    defaults: dict[str, Any],
    input_data: Any,
) -> tuple[dict[str, Any], bool]:
    """Overlay caller input on synthesized defaults.

    A caller value wins only when it is neither None nor an empty string.

    Returns:
        (merged form data, whether any synthesized default was kept)
    """
    merged = dict(defaults)
    provided: set[str] = set()

    if isinstance(input_data, dict):
        for key, value in input_data.items():
            if value is None or value == "":
                continue
            merged[key] = value
            provided.add(key)

    used_defaults = any(key not in provided for key in defaults)
    return merged, used_defaults
