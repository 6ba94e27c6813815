"""
Pytest configuration and fixtures
"""
import json
from typing import Callable, List

import httpx
import pytest
import pytest_asyncio

from concern2care.deepseek_client import DeepSeekClient
from concern2care.settings import settings


Handler = Callable[[httpx.Request], httpx.Response]


def completion_response(content) -> httpx.Response:
	return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
	# Tests never reach the real API; individual tests inject a mock transport
	monkeypatch.setattr(settings, "deepseek_api_key", None)


@pytest.fixture
def captured_requests() -> List[httpx.Request]:
	return []


@pytest.fixture
def created_clients() -> List[DeepSeekClient]:
	return []


@pytest.fixture
def make_client(captured_requests, created_clients) -> Callable[[Handler], DeepSeekClient]:
	"""Build a client whose HTTP calls are answered by ``handler``."""
	def _make(handler: Handler) -> DeepSeekClient:
		def _recording(request: httpx.Request) -> httpx.Response:
			captured_requests.append(request)
			return handler(request)
		client = DeepSeekClient(api_key="test-key", transport=httpx.MockTransport(_recording))
		created_clients.append(client)
		return client
	return _make


@pytest_asyncio.fixture
async def mock_llm(make_client, created_clients):
	"""Client factory for async tests; every client built is closed afterwards."""
	yield make_client
	for client in created_clients:
		await client.aclose()


def request_json(request: httpx.Request) -> dict:
	return json.loads(request.content)
