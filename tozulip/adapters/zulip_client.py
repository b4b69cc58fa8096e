"""Zulip API client wrapper."""

from __future__ import annotations

import requests

from tozulip.core.errors import TransportError, ZulipApiError


def _utf8(value: str) -> bytes:
    # undecodable argv bytes arrive as lone surrogates; restore the raw bytes
    return value.encode("utf-8", "surrogateescape")


class ZulipClient:
    """Minimal wrapper around the Zulip messages API."""

    def __init__(
        self,
        host: str,
        email: str,
        api_key: str,
        *,
        timeout: float | None = None,
    ) -> None:
        self._host = host.rstrip("/")
        self._email = email
        self._api_key = api_key
        self._timeout = timeout

    @property
    def messages_url(self) -> str:
        return f"https://{self._host}/api/v1/messages"

    def send_stream_message(self, *, stream: str, topic: str, content: str) -> None:
        """Post `content` to `stream`/`topic`; raise on anything but HTTP 200.

        Form values and credentials go out as UTF-8 bytes, so non-latin-1
        credentials and undecodable message bytes are sent verbatim.
        """

        payload = {
            "type": b"stream",
            "to": _utf8(stream),
            "topic": _utf8(topic),
            "content": _utf8(content),
        }

        # timeout=None keeps the request unbounded unless a timeout is configured
        try:
            response = requests.post(
                self.messages_url,
                data=payload,
                auth=(_utf8(self._email), _utf8(self._api_key)),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        except UnicodeError as exc:
            raise TransportError(f"cannot encode request: {exc}") from exc

        if response.status_code != 200:
            raise ZulipApiError(response.status_code, response.text)
