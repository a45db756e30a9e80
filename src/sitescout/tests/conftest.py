import json
from typing import Callable, List

import httpx
import pytest


class Recorder:
    """MockTransport가 받은 요청 기록."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def mock_client(recorder: Recorder) -> Callable[..., httpx.AsyncClient]:
    def factory(handler=None, *, status: int = 200, body=None, text: str | None = None) -> httpx.AsyncClient:
        def default_handler(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, content=json.dumps(body or {}).encode(),
                                  headers={"content-type": "application/json"})

        inner = handler or default_handler

        async def record(request: httpx.Request):
            recorder.requests.append(request)
            result = inner(request)
            if hasattr(result, "__await__"):
                result = await result
            return result

        return httpx.AsyncClient(transport=httpx.MockTransport(record))

    return factory
