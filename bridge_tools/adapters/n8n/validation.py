"""Workflow node shaping and structural validation.

Nothing here touches the network. ``normalize_node`` shapes nodes into the
body accepted by ``POST workflows``; the ``validate_*`` functions apply a
fixed rule list and render a pass/fail report.
"""

from typing import Any

from .exceptions import N8nValidationError

# Optional node fields and the type each is coerced to.
OPTIONAL_NODE_FIELDS: dict[str, type] = {
    "credentials": dict,
    "disabled": bool,
    "notes": str,
    "notesInFlow": bool,
    "onError": str,
    "retryOnFail": bool,
    "maxTries": float,
    "waitBetweenTries": float,
    "webhookId": str,
    "executeOnce": bool,
    "alwaysOutputData": bool,
}

# Fields whose null value means "not set".
NULLABLE_FIELDS = {"credentials", "notes", "onError", "webhookId"}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_number(value: Any) -> int | float:
    """Numeric coercion that keeps integral values as int."""
    number = float(value)
    return int(number) if number.is_integer() else number


def is_valid_node(node: Any) -> bool:
    """A node needs a type, a name and a numeric ``[x, y]`` position."""
    if not isinstance(node, dict):
        return False
    if not node.get("type") or not node.get("name"):
        return False
    position = node.get("position")
    if not isinstance(position, (list, tuple)) or len(position) != 2:
        return False
    return all(_is_number(p) for p in position)


def normalize_node(node: dict[str, Any]) -> dict[str, Any]:
    """Canonical node for workflow creation.

    Raises:
        N8nValidationError: Node lacks type, name or a valid position
    """
    if not is_valid_node(node):
        raise N8nValidationError(
            "Node must have type, name, and position [x, y] with numeric values"
        )

    type_version = node.get("typeVersion")
    try:
        type_version = _as_number(type_version) if type_version is not None else 1
    except (TypeError, ValueError) as e:
        raise N8nValidationError("Node typeVersion must be a number") from e

    normalized: dict[str, Any] = {
        "type": str(node["type"]),
        "name": str(node["name"]),
        "position": [_as_number(node["position"][0]), _as_number(node["position"][1])],
        "typeVersion": type_version,
    }

    if node.get("parameters") is not None:
        normalized["parameters"] = node["parameters"]

    node_id = node.get("id")
    if node_id is not None and str(node_id).strip():
        normalized["id"] = str(node_id)

    for field, cast in OPTIONAL_NODE_FIELDS.items():
        if field not in node:
            continue
        value = node[field]
        if value is None and (field in NULLABLE_FIELDS or cast is not bool):
            continue
        try:
            if cast is dict:
                normalized[field] = value
            elif cast is float:
                normalized[field] = _as_number(value)
            else:
                normalized[field] = cast(value)
        except (TypeError, ValueError) as e:
            raise N8nValidationError(f"Node field {field!r} has an invalid value") from e

    return normalized


def _render_report(
    title: str,
    header_lines: list[str],
    errors: list[str],
    warnings: list[str],
    passed_message: str,
) -> str:
    result = f"**{title}:**\n\n"
    for line in header_lines:
        result += f"• {line}\n"
    result += "\n"

    if not errors and not warnings:
        result += "✅ **Validation Passed**\n"
        result += passed_message
        return result

    if errors:
        result += f"❌ **Errors ({len(errors)}):**\n"
        for error in errors:
            result += f"  • {error}\n"
        result += "\n"
    if warnings:
        result += f"⚠️ **Warnings ({len(warnings)}):**\n"
        for warning in warnings:
            result += f"  • {warning}\n"

    return result


def check_node_config(
    node_type: str,
    config: dict[str, Any],
    mode: str = "minimal",
) -> tuple[list[str], list[str]]:
    """Apply node rules. Returns (errors, warnings)."""
    errors: list[str] = []
    warnings: list[str] = []
    parameters = config.get("parameters")
    if parameters is None:
        parameters = {}
    elif not isinstance(parameters, dict):
        errors.append('Node "parameters" must be an object')
        parameters = {}

    if config.get("type") and config["type"] != node_type:
        warnings.append("Node type in config does not match the provided nodeType parameter")

    if mode == "full":
        if not config.get("name"):
            warnings.append("Node name is recommended but not required")
        position = config.get("position")
        if not isinstance(position, (list, tuple)) or len(position) != 2:
            warnings.append("Node position [x, y] is recommended for proper workflow visualization")

    if "webhook" in node_type:
        if not parameters.get("httpMethod"):
            errors.append('Webhook node requires "parameters.httpMethod" (GET, POST, etc.)')
        if not parameters.get("path"):
            warnings.append('Webhook node should have "parameters.path" for the webhook URL')

    if "httpRequest" in node_type:
        if not parameters.get("url"):
            errors.append('HTTP Request node requires "parameters.url"')
        if not parameters.get("method"):
            errors.append('HTTP Request node requires "parameters.method" (GET, POST, etc.)')

    return errors, warnings


def validate_node_config(node_type: str, config: dict[str, Any], mode: str = "minimal") -> str:
    """Human-readable validation report for a single node."""
    errors, warnings = check_node_config(node_type, config, mode)
    return _render_report(
        "Node Validation Result",
        [f"**Node Type:** {node_type}", f"**Validation Mode:** {mode}"],
        errors,
        warnings,
        "The node configuration appears to be valid.",
    )


def check_workflow_config(workflow: dict[str, Any]) -> tuple[list[str], list[str]]:
    """Apply workflow rules. Returns (errors, warnings)."""
    errors: list[str] = []
    warnings: list[str] = []

    if not workflow.get("name"):
        errors.append('Workflow must have a "name" property')

    nodes = workflow.get("nodes")
    if not isinstance(nodes, list):
        errors.append('Workflow must have a "nodes" array')
    else:
        if not nodes:
            errors.append("Workflow must have at least one node")
        for index, node in enumerate(nodes, start=1):
            node = node if isinstance(node, dict) else {}
            if not node.get("type"):
                errors.append(f'Node {index} is missing "type" property')
            if not node.get("name"):
                warnings.append(f'Node {index} should have a "name" property')
            if not isinstance(node.get("position"), (list, tuple)):
                warnings.append(f'Node {index} should have a "position" property [x, y]')

    if not isinstance(workflow.get("connections"), dict):
        warnings.append('Workflow should have a "connections" object (can be empty {})')

    return errors, warnings


def validate_workflow_config(workflow: dict[str, Any], notes: list[str] | None = None) -> str:
    """Human-readable validation report for a whole workflow."""
    errors, warnings = check_workflow_config(workflow)
    nodes = workflow.get("nodes")
    connections = workflow.get("connections")

    header = [
        f"**Workflow Name:** {workflow.get('name') or 'Not provided'}",
        f"**Nodes:** {len(nodes) if isinstance(nodes, list) else 0}",
        f"**Connections:** {len(connections) if isinstance(connections, dict) else 0}",
    ]
    header.extend(notes or [])

    return _render_report(
        "Workflow Validation Result",
        header,
        errors,
        warnings,
        "The workflow configuration appears to be valid and ready for creation.",
    )
