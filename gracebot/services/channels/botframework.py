"""Bot Framework connector channel adapter."""

import time
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from gracebot.core.exceptions import ChannelError, InvalidActivityError
from gracebot.models import Activity
from gracebot.services.channels.base import ChannelAdapter

logger = structlog.get_logger()

# Refresh tokens a little before they actually expire
TOKEN_EXPIRY_MARGIN_SECONDS = 60


class BotFrameworkAdapter(ChannelAdapter):
    """Bot Framework connector adapter.

    Handles:
    - Parsing activities posted to the messaging endpoint
    - Sending replies via the connector REST API of the activity's service URL
    - Client-credentials tokens when an app id and password are configured
    """

    def __init__(
        self,
        app_id: str = "",
        app_password: str = "",
        token_url: str = "https://login.microsoftonline.com/botframework.com/oauth2/v2.0/token",
        scope: str = "https://api.botframework.com/.default",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.app_id = app_id
        self.app_password = app_password
        self.token_url = token_url
        self.scope = scope
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

        self._token: str | None = None
        self._token_expires_at = 0.0

        if self.app_id and self.app_password:
            logger.info("Bot Framework adapter initialized", app_id=self.app_id)
        else:
            logger.warning("Bot Framework credentials not configured, replies are sent unauthenticated")

    @property
    def channel_name(self) -> str:
        return "botframework"

    def parse_activity(self, payload: dict[str, Any]) -> Activity:
        try:
            activity = Activity.model_validate(payload)
        except PydanticValidationError as e:
            raise InvalidActivityError(
                "Invalid activity payload",
                channel=self.channel_name,
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

        logger.info(
            "Parsed activity",
            activity_id=activity.id,
            type=activity.type,
            channel_id=activity.channel_id,
        )
        return activity

    async def _get_token(self) -> str | None:
        """Get a connector access token, or None when running without credentials."""
        if not (self.app_id and self.app_password):
            return None

        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        try:
            response = await self._client.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.app_id,
                    "client_secret": self.app_password,
                    "scope": self.scope,
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to obtain connector token", error=str(e))
            raise ChannelError(
                f"Failed to obtain connector token: {e}",
                channel=self.channel_name,
                details={"reason": "auth"},
            ) from e

        body = response.json()
        self._token = body["access_token"]
        expires_in = float(body.get("expires_in", 3600))
        self._token_expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        return self._token

    def _activities_url(self, activity: Activity) -> str:
        if not activity.service_url:
            raise ChannelError(
                "Activity has no service URL",
                channel=self.channel_name,
                details={"activity_id": activity.id},
            )
        if activity.conversation is None:
            raise ChannelError(
                "Activity has no conversation",
                channel=self.channel_name,
                details={"activity_id": activity.id},
            )

        url = (
            f"{activity.service_url.rstrip('/')}/v3/conversations/"
            f"{quote(activity.conversation.id, safe='')}/activities"
        )
        if activity.reply_to_id:
            url = f"{url}/{quote(activity.reply_to_id, safe='')}"
        return url

    async def send_activity(self, activity: Activity) -> Activity:
        """Send an activity via the connector REST API.

        Args:
            activity: Activity to send

        Returns:
            The sent activity, carrying the connector-assigned id when one is returned
        """
        url = self._activities_url(activity)
        headers: dict[str, str] = {}
        token = await self._get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.post(url, json=activity.to_wire(), headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Connector rejected activity",
                status_code=e.response.status_code,
                url=url,
            )
            raise ChannelError(
                f"Failed to send activity: HTTP {e.response.status_code}",
                channel=self.channel_name,
                details={"status_code": e.response.status_code, "url": url},
            ) from e
        except httpx.HTTPError as e:
            logger.error("Failed to reach connector", error=str(e), url=url)
            raise ChannelError(
                f"Failed to send activity: {e}",
                channel=self.channel_name,
                details={"url": url},
            ) from e

        resource_id = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                resource_id = body.get("id")

        sent = activity.model_copy(update={"id": resource_id}) if resource_id else activity

        logger.info(
            "Sent activity",
            activity_id=sent.id,
            reply_to_id=sent.reply_to_id,
            conversation_id=sent.conversation.id if sent.conversation else None,
        )
        return sent

    async def close(self) -> None:
        await self._client.aclose()
