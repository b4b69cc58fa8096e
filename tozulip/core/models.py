"""Pydantic models shared across the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from config import Config


class SendRequest(BaseModel):
    """Everything needed to post one message to a Zulip stream."""

    host: str
    mail: str
    apikey: str
    stream: str
    topic: str
    content: str

    @classmethod
    def from_config(cls, config: Config, content: str) -> SendRequest:
        return cls(
            host=config.host,
            mail=config.mail,
            apikey=config.apikey,
            stream=config.stream,
            topic=config.topic,
            content=content,
        )
