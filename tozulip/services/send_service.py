"""Deliver a single message to a Zulip stream."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tozulip.adapters.zulip_client import ZulipClient
from tozulip.core.models import SendRequest

if TYPE_CHECKING:
    from config import Config


class SendService:
    """Hand a `SendRequest` to the Zulip client, logging what goes out."""

    def __init__(self, *, zulip_client: ZulipClient, logger: Any) -> None:
        self._zulip_client = zulip_client
        self._logger = logger

    def send(self, request: SendRequest) -> None:
        self._logger.debug(
            "Posting %s chars to %s > %s on %s",
            len(request.content),
            request.stream,
            request.topic,
            request.host,
        )
        self._zulip_client.send_stream_message(
            stream=request.stream,
            topic=request.topic,
            content=request.content,
        )
        self._logger.debug("Zulip accepted the message")


def send(config: Config, message: str, *, logger: Any) -> None:
    """Send `message` using the credentials and destination in `config`."""

    request = SendRequest.from_config(config, message)
    zulip_client = ZulipClient(
        host=request.host,
        email=request.mail,
        api_key=request.apikey,
        timeout=config.timeout,
    )
    SendService(zulip_client=zulip_client, logger=logger).send(request)
