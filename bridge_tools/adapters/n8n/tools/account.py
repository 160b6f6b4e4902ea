"""n8n account tools: credentials, current user, webhooks, tags."""

from bridge_tools.adapters.n8n.formatting import flag, items_of

from .base import N8nToolBase


class AccountTools(N8nToolBase):
    """Read-mostly views over the n8n instance."""

    async def list_credentials(self, user_id: str | None = None) -> str:
        config, error = await self._authenticate(user_id)
        if error:
            return error

        response = await self._call(config, "credentials")
        if not response.success:
            return "Failed to get credentials"

        credentials = items_of(response.data)
        if not credentials:
            return "No credentials found"

        result = f"Found {len(credentials)} credentials:\n\n"
        for credential in credentials:
            result += f"• **{credential.get('name') or 'No name'}**\n"
            result += f"  ID: {credential.get('id') or 'unknown'}\n"
            result += f"  Type: {credential.get('type') or 'unknown'}\n"
            result += f"  Created: {credential.get('createdAt') or 'unknown'}\n"
            result += f"  Updated: {credential.get('updatedAt') or 'unknown'}\n\n"

        return result

    async def get_credential(self, user_id: str | None = None, credential_id: str | None = None) -> str:
        config, error = await self._authenticate(user_id)
        if error:
            return error
        if not credential_id:
            return "Error: Credential ID is required."

        response = await self._call(config, f"credentials/{credential_id}")
        if not response.success:
            return f"Failed to get credential: {credential_id}"

        data = response.payload
        result = "**Credential Details:**\n\n"
        result += f"• **ID:** {data.get('id') or 'unknown'}\n"
        result += f"• **Name:** {data.get('name') or 'No name'}\n"
        result += f"• **Type:** {data.get('type') or 'unknown'}\n"
        result += f"• **Created:** {data.get('createdAt') or 'unknown'}\n"
        result += f"• **Updated:** {data.get('updatedAt') or 'unknown'}\n"

        return result

    async def get_user_info(self, user_id: str | None = None) -> str:
        """The n8n user owning the API key."""
        config, error = await self._authenticate(user_id)
        if error:
            return error

        response = await self._call(config, "users/me")
        if not response.success:
            return "Failed to get user info"

        data = response.payload
        result = "**User Information:**\n\n"
        result += f"• **ID:** {data.get('id') or 'unknown'}\n"
        result += f"• **Email:** {data.get('email') or 'No email'}\n"
        result += f"• **First Name:** {data.get('firstName') or 'No first name'}\n"
        result += f"• **Last Name:** {data.get('lastName') or 'No last name'}\n"
        result += f"• **Created:** {data.get('createdAt') or 'unknown'}\n"

        return result

    async def list_webhooks(self, user_id: str | None = None) -> str:
        config, error = await self._authenticate(user_id)
        if error:
            return error

        response = await self._call(config, "webhooks")
        if not response.success:
            return "Failed to get webhooks"

        webhooks = items_of(response.data)
        if not webhooks:
            return "No webhooks found"

        result = f"Found {len(webhooks)} webhooks:\n\n"
        for webhook in webhooks:
            result += f"• **Webhook ID:** {webhook.get('id') or 'unknown'}\n"
            result += f"  Path: {webhook.get('path') or 'No path'}\n"
            result += f"  Method: {webhook.get('method') or 'unknown'}\n"
            result += f"  Workflow ID: {webhook.get('workflowId') or 'unknown'}\n"
            result += f"  Active: {flag(webhook.get('active'))}\n\n"

        return result

    async def list_tags(self, user_id: str | None = None) -> str:
        config, error = await self._authenticate(user_id)
        if error:
            return error

        response = await self._call(config, "tags")
        if not response.success:
            return "Failed to get tags"

        tags = items_of(response.data)
        if not tags:
            return "No tags found"

        result = f"Found {len(tags)} tags:\n\n"
        for tag in tags:
            result += f"• **{tag.get('name') or 'No name'}**\n"
            result += f"  ID: {tag.get('id') or 'unknown'}\n"
            result += f"  Created: {tag.get('createdAt') or 'unknown'}\n"
            result += f"  Updated: {tag.get('updatedAt') or 'unknown'}\n\n"

        return result

    async def create_tag(self, user_id: str | None = None, name: str | None = None) -> str:
        config, error = await self._authenticate(user_id)
        if error:
            return error
        if not isinstance(name, str) or not name.strip():
            return "Error: Tag name is required."

        response = await self._call(config, "tags", json_data={"name": name}, method="POST")
        if not response.success:
            return f"Failed to create tag: {name}"

        data = response.payload
        result = "**Created Tag:**\n\n"
        result += f"• **ID:** {data.get('id') or 'unknown'}\n"
        result += f"• **Name:** {data.get('name') or 'No name'}\n"
        result += f"• **Created:** {data.get('createdAt') or 'unknown'}\n"

        return result
