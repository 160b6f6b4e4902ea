"""Workflow trigger detection.

n8n is inconsistent about where trigger addressing lives across versions,
so each lookup is an ordered list of accessors; the first non-empty value
wins.
"""

from typing import Any, Callable

from .schemas import Trigger, TriggerType

TRIGGER_NODE_TYPES: dict[str, TriggerType] = {
    "n8n-nodes-base.webhook": TriggerType.WEBHOOK,
    "n8n-nodes-base.formTrigger": TriggerType.FORM,
    "n8n-nodes-base.scheduleTrigger": TriggerType.SCHEDULE,
    "n8n-nodes-base.chatTrigger": TriggerType.CHAT,
    "n8n-nodes-base.manualTrigger": TriggerType.MANUAL,
}

FORM_TRIGGER_TYPE = "n8n-nodes-base.formTrigger"

# (node, workflow) -> value
Accessor = Callable[[dict[str, Any], dict[str, Any]], Any]


def dig(data: Any, *keys: str) -> Any:
    """Nested dict lookup that tolerates missing or non-dict levels."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


WEBHOOK_PATH_ACCESSORS: list[Accessor] = [
    lambda node, wf: dig(node, "parameters", "path"),
    lambda node, wf: dig(node, "parameters", "pathPrefix"),
    lambda node, wf: dig(node, "parameters", "options", "path"),
]

WEBHOOK_METHOD_ACCESSORS: list[Accessor] = [
    lambda node, wf: dig(node, "parameters", "httpMethod"),
    lambda node, wf: dig(node, "parameters", "options", "httpMethod"),
]

FORM_ID_ACCESSORS: list[Accessor] = [
    lambda node, wf: dig(node, "parameters", "formId"),
    lambda node, wf: dig(node, "parameters", "id"),
    lambda node, wf: node.get("webhookId"),
    lambda node, wf: dig(wf, "settings", "formId"),
    lambda node, wf: dig(wf, "staticData", "formId"),
    lambda node, wf: wf.get("webhookId"),
    lambda node, wf: wf.get("id"),
]


def first_populated(
    accessors: list[Accessor],
    node: dict[str, Any],
    workflow: dict[str, Any],
) -> Any:
    for accessor in accessors:
        value = accessor(node, workflow)
        if value:
            return value
    return None


def find_trigger_node(nodes: Any) -> dict[str, Any] | None:
    """First node (in list order) whose type is a known trigger."""
    if not isinstance(nodes, list):
        return None
    for node in nodes:
        if isinstance(node, dict) and node.get("type") in TRIGGER_NODE_TYPES:
            return node
    return None


def detect_trigger(workflow: dict[str, Any]) -> Trigger:
    """Classify a workflow by its first trigger node.

    Args:
        workflow: Workflow as returned by ``GET workflows/{id}``

    Returns:
        Trigger with type, source node, addressing path and HTTP method
    """
    node = find_trigger_node(workflow.get("nodes"))
    if node is None:
        return Trigger(type=TriggerType.UNKNOWN)

    trigger_type = TRIGGER_NODE_TYPES[node["type"]]
    path = None
    http_method = "POST"

    if trigger_type == TriggerType.WEBHOOK:
        path = first_populated(WEBHOOK_PATH_ACCESSORS, node, workflow) or ""
        http_method = first_populated(WEBHOOK_METHOD_ACCESSORS, node, workflow) or "POST"
    elif trigger_type == TriggerType.FORM:
        path = first_populated(FORM_ID_ACCESSORS, node, workflow)

    return Trigger(
        type=trigger_type,
        node=node,
        path=str(path) if path is not None else None,
        http_method=str(http_method).upper(),
    )


def active_version_trigger(workflow: dict[str, Any]) -> dict[str, Any] | None:
    """Form trigger node of the published version, if the API included it."""
    nodes = dig(workflow, "activeVersion", "nodes")
    if not isinstance(nodes, list):
        return None
    for node in nodes:
        if isinstance(node, dict) and node.get("type") == FORM_TRIGGER_TYPE:
            return node
    return None
