"""
Pytest fixtures for aura analyzer tests.
"""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from modules.aura_analyzer.models import AnalysisResult, ProviderSpec


def completion_body(content: Any) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture()
def baseline() -> AnalysisResult:
    return AnalysisResult(aura_color="red", energy_level=50, mood_score=7)


@pytest.fixture()
def make_spec() -> Callable[..., ProviderSpec]:
    def _make(name: str = "glm", **overrides: Any) -> ProviderSpec:
        fields = {
            "name": name,
            "endpoint_url": f"https://{name}.example.com/chat/completions",
            "credential": f"{name}-key",
            "model": f"{name}-model",
        }
        fields.update(overrides)
        return ProviderSpec(**fields)

    return _make


@pytest.fixture()
def recorded_sleeps() -> List[float]:
    return []


@pytest.fixture()
def fake_sleep(recorded_sleeps):
    async def _sleep(delay: float) -> None:
        recorded_sleeps.append(delay)

    return _sleep


@pytest.fixture()
def mock_http() -> Callable[..., httpx.AsyncClient]:
    """
    Build an AsyncClient whose transport replays the given responses in order.

    Each item is either an httpx.Response, a dict (sent as a 200 completion
    with that content), or an exception instance to raise.
    """

    def _make(*responses: Any, requests: List[httpx.Request] = None) -> httpx.AsyncClient:
        queue = list(responses)

        def handler(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            item = queue.pop(0)
            if isinstance(item, Exception):
                raise item
            if isinstance(item, httpx.Response):
                return item
            return httpx.Response(200, json=completion_body(json.dumps(item)))

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
