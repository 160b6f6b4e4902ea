"""n8n catalog tools: node types and workflow templates.

These hit the public n8n catalog and need no user credentials. When the
catalog is unreachable, node lookups fall back to a short built-in list.
"""

from urllib.parse import quote

from bridge_obs.logging import get_logger
from bridge_tools.adapters.n8n.formatting import items_of, truncate

from .base import N8nToolBase

logger = get_logger(__name__)

COMMON_NODES = [
    {"type": "n8n-nodes-base.webhook", "name": "Webhook"},
    {"type": "n8n-nodes-base.httpRequest", "name": "HTTP Request"},
    {"type": "n8n-nodes-base.set", "name": "Set"},
    {"type": "n8n-nodes-base.if", "name": "IF"},
    {"type": "n8n-nodes-base.switch", "name": "Switch"},
    {"type": "n8n-nodes-base.code", "name": "Code"},
    {"type": "n8n-nodes-base.function", "name": "Function"},
    {"type": "n8n-nodes-base.slack", "name": "Slack"},
    {"type": "n8n-nodes-base.gmail", "name": "Gmail"},
    {"type": "n8n-nodes-base.googleSheets", "name": "Google Sheets"},
]

BUILTIN_NODE_INFO = {
    "n8n-nodes-base.webhook": {
        "name": "Webhook",
        "description": "Triggers a workflow when a webhook is called. Can be used to receive data from external services.",
        "common_properties": ["httpMethod", "path", "responseMode"],
    },
    "n8n-nodes-base.httpRequest": {
        "name": "HTTP Request",
        "description": "Makes an HTTP request to a specified URL. Can be used to call APIs or fetch data.",
        "common_properties": ["method", "url", "authentication", "body"],
    },
    "n8n-nodes-base.set": {
        "name": "Set",
        "description": "Sets values on items. Can be used to modify or add data to workflow items.",
        "common_properties": ["values", "options"],
    },
}


class DiscoveryTools(N8nToolBase):
    """Node and template lookup."""

    async def search_nodes(self, keyword: str | None = None) -> str:
        """Search node types by keyword."""
        if not keyword:
            return "Error: Keyword is required for node search."

        response = await self.client.get_public(self._public_url("nodes"), params={"search": keyword})
        if not response.success:
            return self._search_common_nodes(keyword, response.error_message())

        nodes = items_of(response.data)
        if not nodes:
            return (
                f'No nodes found matching "{keyword}". '
                "Try a different keyword or check the node type name."
            )

        limit = self.settings.N8N_SEARCH_RESULT_LIMIT
        result = f'Found {len(nodes)} node(s) matching "{keyword}":\n\n'
        for node in nodes[:limit]:
            result += f"• **{node.get('name') or node.get('type') or 'Unknown'}**\n"
            result += f"  Type: {node.get('type') or 'unknown'}\n"
            if node.get("displayName"):
                result += f"  Display Name: {node['displayName']}\n"
            if node.get("description"):
                result += f"  Description: {truncate(node['description'], 100)}\n"
            result += "\n"

        if len(nodes) > limit:
            result += (
                f"\n... and {len(nodes) - limit} more results. "
                "Refine your search for more specific results."
            )

        return result

    @staticmethod
    def _search_common_nodes(keyword: str, error: str) -> str:
        logger.info("n8n_node_search_fallback", keyword=keyword, error=error)
        needle = keyword.lower()
        matching = [
            node
            for node in COMMON_NODES
            if needle in node["name"].lower() or needle in node["type"].lower()
        ]

        if not matching:
            return (
                f"Error searching nodes: {error}. Try using a specific node type "
                'like "webhook", "httpRequest", or "slack".'
            )

        result = f'Found {len(matching)} common node(s) matching "{keyword}":\n\n'
        for node in matching:
            result += f"• **{node['name']}**\n"
            result += f"  Type: {node['type']}\n\n"
        result += "\nNote: For complete node information, connect to your n8n instance."
        return result

    async def get_node(self, node_type: str | None = None) -> str:
        """Details of one node type, e.g. ``n8n-nodes-base.webhook``."""
        if not node_type:
            return 'Error: Node type is required. Example: "n8n-nodes-base.webhook"'

        response = await self.client.get_public(self._public_url(f"nodes/{quote(node_type, safe='')}"))
        if not response.success:
            return self._builtin_node_info(node_type, response.error_message())

        node = response.payload.get("data") if isinstance(response.payload.get("data"), dict) else response.payload
        if not node:
            return f'Node "{node_type}" not found. Use search_n8n_nodes to find available nodes.'

        result = "**Node Information:**\n\n"
        result += f"• **Name:** {node.get('name') or node.get('displayName') or 'Unknown'}\n"
        result += f"• **Type:** {node.get('type') or node_type}\n"
        if node.get("displayName"):
            result += f"• **Display Name:** {node['displayName']}\n"
        if node.get("description"):
            result += f"• **Description:** {node['description']}\n"
        if node.get("version"):
            result += f"• **Version:** {node['version']}\n"
        if isinstance(node.get("defaults"), dict):
            result += f"• **Default Properties:** {', '.join(node['defaults'])}\n"
        if isinstance(node.get("properties"), list):
            result += f"• **Properties:** {len(node['properties'])} properties available\n"

        return result

    @staticmethod
    def _builtin_node_info(node_type: str, error: str) -> str:
        info = BUILTIN_NODE_INFO.get(node_type)
        if not info:
            return (
                f'Node "{node_type}" not found. Error: {error}. '
                "Use search_n8n_nodes to find available nodes."
            )

        result = "**Node Information:**\n\n"
        result += f"• **Name:** {info['name']}\n"
        result += f"• **Type:** {node_type}\n"
        result += f"• **Description:** {info['description']}\n"
        result += f"• **Common Properties:** {', '.join(info['common_properties'])}\n"
        result += "\nNote: For complete node documentation, check n8n.io/docs or connect to your n8n instance."
        return result

    async def search_templates(self, query: str | None = None, limit: int = 20) -> str:
        """Find workflow templates by keyword."""
        if not query:
            return "Error: Search query is required."
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            return "Error: Template limit must be a number."
        limit = max(1, min(limit, self.settings.N8N_TEMPLATE_LIMIT_MAX))

        response = await self.client.get_public(
            self._public_url("workflows/templates"),
            params={"search": query, "limit": limit},
        )
        if not response.success:
            return (
                f"Error searching templates: {response.error_message()}. "
                "The n8n templates API may be temporarily unavailable."
            )

        templates = items_of(response.data)
        if not templates:
            return (
                f'No templates found matching "{query}". '
                'Try different keywords like "slack", "gmail", "automation", etc.'
            )

        result = f'Found {len(templates)} template(s) matching "{query}":\n\n'
        for index, template in enumerate(templates, start=1):
            result += f"{index}. **{template.get('name') or 'Untitled Template'}**\n"
            result += f"   ID: {template.get('id') or 'unknown'}\n"
            if template.get("description"):
                result += f"   Description: {truncate(template['description'], 150)}\n"
            if template.get("categories"):
                result += f"   Categories: {', '.join(str(c) for c in template['categories'])}\n"
            if template.get("totalViews"):
                result += f"   Views: {template['totalViews']}\n"
            result += "\n"

        return result

    async def get_template(self, template_id: str | None = None) -> str:
        """Details of one workflow template."""
        if not template_id:
            return "Error: Template ID is required. Use search_n8n_templates to find template IDs."

        response = await self.client.get_public(self._public_url(f"workflows/templates/{template_id}"))
        if not response.success:
            return (
                f"Error retrieving template: {response.error_message()}. "
                f'Template ID "{template_id}" may not exist.'
            )

        template = response.payload.get("data") if isinstance(response.payload.get("data"), dict) else response.payload
        if not template:
            return (
                f'Template "{template_id}" not found. '
                "Use search_n8n_templates to find available templates."
            )

        result = "**Template Details:**\n\n"
        result += f"• **Name:** {template.get('name') or 'Untitled'}\n"
        result += f"• **ID:** {template.get('id') or template_id}\n"
        if template.get("description"):
            result += f"• **Description:** {template['description']}\n"
        if template.get("categories"):
            result += f"• **Categories:** {', '.join(str(c) for c in template['categories'])}\n"
        if template.get("totalViews"):
            result += f"• **Views:** {template['totalViews']}\n"
        if isinstance(template.get("nodes"), list):
            result += f"• **Nodes:** {len(template['nodes'])} nodes\n"
        if template.get("workflow"):
            result += "• **Workflow:** Available (use create_n8n_workflow to import)\n"
        if template.get("url"):
            result += f"• **URL:** {template['url']}\n"

        return result
