from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from config import load_config
from tozulip.core.errors import ZulipApiError
from tozulip.core.models import SendRequest
from tozulip.services import send_service
from tozulip.services.send_service import SendService


@dataclass
class FakeZulipClient:
    sent: list[dict[str, Any]] = field(default_factory=list)
    error: Exception | None = None

    def send_stream_message(self, **kwargs: Any) -> None:
        self.sent.append(kwargs)
        if self.error is not None:
            raise self.error


class DummyLogger:
    def __init__(self) -> None:
        self.debugs: list[str] = []

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.debugs.append(message % args if args else message)


class FakeResponse:
    status_code = 200
    text = '{"result":"success","msg":"","id":42}'


def _request(**overrides: str) -> SendRequest:
    values = {
        "host": "chat.example.com",
        "mail": "bot@example.com",
        "apikey": "key",
        "stream": "ops",
        "topic": "deploys",
        "content": "Deployed v1.2.3",
    }
    values.update(overrides)
    return SendRequest(**values)


def test_send_request_from_config() -> None:
    config = load_config(
        overrides={
            "host": "chat.example.com",
            "mail": "bot@example.com",
            "apikey": "key",
            "stream": "ops",
            "topic": "deploys",
        }
    )

    assert SendRequest.from_config(config, "hello") == _request(content="hello")  # noqa: S101


def test_send_service_delivers_stream_message() -> None:
    client = FakeZulipClient()
    logger = DummyLogger()
    service = SendService(zulip_client=client, logger=logger)  # type: ignore[arg-type]

    service.send(_request())

    assert client.sent == [  # noqa: S101
        {"stream": "ops", "topic": "deploys", "content": "Deployed v1.2.3"}
    ]
    assert logger.debugs[0] == "Posting 15 chars to ops > deploys on chat.example.com"  # noqa: S101


def test_send_service_passes_empty_values_through() -> None:
    client = FakeZulipClient()
    service = SendService(zulip_client=client, logger=DummyLogger())  # type: ignore[arg-type]

    service.send(_request(stream="", topic="", content=""))

    assert client.sent == [{"stream": "", "topic": "", "content": ""}]  # noqa: S101


def test_send_service_propagates_api_errors() -> None:
    client = FakeZulipClient(error=ZulipApiError(401, "unauthorized"))
    logger = DummyLogger()
    service = SendService(zulip_client=client, logger=logger)  # type: ignore[arg-type]

    with pytest.raises(ZulipApiError):
        service.send(_request())

    assert len(client.sent) == 1  # noqa: S101
    assert "Zulip accepted the message" not in logger.debugs  # noqa: S101


def test_send_builds_client_from_config(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[dict[str, Any]] = []

    def fake_post(url, data, auth, timeout):  # type: ignore[override]
        captured.append({"url": url, "data": data, "auth": auth, "timeout": timeout})
        return FakeResponse()

    monkeypatch.setattr("tozulip.adapters.zulip_client.requests.post", fake_post)

    config = load_config(
        overrides={
            "host": "chat.example.com",
            "mail": "bot@example.com",
            "apikey": "key",
            "stream": "ops",
            "topic": "deploys",
            "timeout": 3,
        }
    )

    send_service.send(config, "hello", logger=DummyLogger())

    assert captured == [  # noqa: S101
        {
            "url": "https://chat.example.com/api/v1/messages",
            "data": {"type": b"stream", "to": b"ops", "topic": b"deploys", "content": b"hello"},
            "auth": (b"bot@example.com", b"key"),
            "timeout": 3.0,
        }
    ]
