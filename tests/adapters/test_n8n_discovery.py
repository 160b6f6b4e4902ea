"""Tests for node and template lookup against the public catalog."""

import pytest

PUBLIC_BASE = "https://api.n8n.io/api/v1"


class TestNodes:
    @pytest.mark.asyncio
    async def test_search_nodes(self, toolkit, n8n_api):
        n8n_api.add(
            "GET",
            f"{PUBLIC_BASE}/nodes",
            body={"data": [{"name": "Slack", "type": "n8n-nodes-base.slack", "description": "Send messages"}]},
        )

        result = await toolkit.search_nodes("slack")

        assert result.startswith('Found 1 node(s) matching "slack":')
        assert "  Description: Send messages" in result
        assert n8n_api.requests[0].url.params["search"] == "slack"
        assert "X-N8N-API-KEY" not in n8n_api.requests[0].headers

    @pytest.mark.asyncio
    async def test_search_nodes_falls_back_to_common_nodes(self, toolkit):
        """An unreachable catalog still answers from the built-in list."""
        result = await toolkit.search_nodes("slack")

        assert result.startswith('Found 1 common node(s) matching "slack":')
        assert "Type: n8n-nodes-base.slack" in result

    @pytest.mark.asyncio
    async def test_search_nodes_fallback_without_match(self, toolkit):
        result = await toolkit.search_nodes("salesforce")

        assert result.startswith("Error searching nodes:")

    @pytest.mark.asyncio
    async def test_search_nodes_requires_keyword(self, toolkit):
        assert await toolkit.search_nodes() == "Error: Keyword is required for node search."

    @pytest.mark.asyncio
    async def test_get_node(self, toolkit, n8n_api):
        n8n_api.add(
            "GET",
            f"{PUBLIC_BASE}/nodes/n8n-nodes-base.set",
            body={"name": "Set", "type": "n8n-nodes-base.set", "properties": [{}, {}]},
        )

        result = await toolkit.get_node("n8n-nodes-base.set")

        assert "• **Name:** Set" in result
        assert "• **Properties:** 2 properties available" in result

    @pytest.mark.asyncio
    async def test_get_node_falls_back_to_builtin_info(self, toolkit):
        result = await toolkit.get_node("n8n-nodes-base.webhook")

        assert "• **Common Properties:** httpMethod, path, responseMode" in result

        missing = await toolkit.get_node("n8n-nodes-base.unknown")
        assert missing.startswith('Node "n8n-nodes-base.unknown" not found.')


class TestTemplates:
    @pytest.mark.asyncio
    async def test_search_templates_caps_limit(self, toolkit, n8n_api):
        n8n_api.add(
            "GET",
            f"{PUBLIC_BASE}/workflows/templates",
            body={"data": [{"id": 11, "name": "Slack digest", "categories": ["Communication"]}]},
        )

        result = await toolkit.search_templates("slack", limit=500)

        assert result.startswith('Found 1 template(s) matching "slack":')
        assert "   Categories: Communication" in result
        assert n8n_api.requests[0].url.params["limit"] == "50"

    @pytest.mark.asyncio
    async def test_search_templates_failure(self, toolkit):
        result = await toolkit.search_templates("slack")

        assert result.startswith("Error searching templates:")

    @pytest.mark.asyncio
    async def test_get_template(self, toolkit, n8n_api):
        n8n_api.add(
            "GET",
            f"{PUBLIC_BASE}/workflows/templates/11",
            body={"id": 11, "name": "Slack digest", "nodes": [{}, {}, {}], "workflow": {"nodes": []}},
        )

        result = await toolkit.get_template("11")

        assert "• **Nodes:** 3 nodes" in result
        assert "• **Workflow:** Available" in result
        assert await toolkit.get_template() == (
            "Error: Template ID is required. Use search_n8n_templates to find template IDs."
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit, sent", [("10", "10"), (0, "1"), (-5, "1"), (7.9, "7")])
    async def test_search_templates_coerces_limit(self, toolkit, n8n_api, limit, sent):
        n8n_api.add("GET", f"{PUBLIC_BASE}/workflows/templates", body={"data": []})

        await toolkit.search_templates("slack", limit=limit)

        assert n8n_api.requests[0].url.params["limit"] == sent

    @pytest.mark.asyncio
    async def test_search_templates_rejects_non_numeric_limit(self, toolkit, n8n_api):
        assert await toolkit.search_templates("slack", limit="many") == "Error: Template limit must be a number."
        assert n8n_api.requests == []
