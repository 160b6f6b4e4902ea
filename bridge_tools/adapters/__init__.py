"""Tool Adapters.

Available adapters:
- n8n: workflow automation REST API (workflows, executions, credentials,
  tags, webhooks, node catalog, templates)
"""

__all__ = ["n8n"]
