"""Tests for settings and the store composition root."""

import httpx
import pytest

from conftest import make_doc
from fitness_tracker.config import Settings
from fitness_tracker.main import open_store


def test_default_base_url():
    assert Settings(_env_file=None).api_base_url == "http://localhost:5001/api"


def test_base_url_from_fields():
    s = Settings(_env_file=None, api_scheme="https", api_host="tracker.example.com", api_port=8443, api_base_path="v2/")
    assert s.api_base_url == "https://tracker.example.com:8443/v2"


def test_base_url_without_path():
    assert Settings(_env_file=None, api_base_path="").api_base_url == "http://localhost:5001"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("API_HOST", "192.168.1.20")
    monkeypatch.setenv("DEFAULT_USER", "Alex")
    monkeypatch.setenv("DISCARD_STALE_RESPONSES", "false")
    s = Settings(_env_file=None)
    assert s.api_base_url == "http://192.168.1.20:5001/api"
    assert s.default_user == "Alex"
    assert s.discard_stale_responses is False


@pytest.mark.asyncio
async def test_open_store_wires_client_and_closes():
    sent: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(200, json=[make_doc("abc")])

    cfg = Settings(_env_file=None, api_host="tracker.local")
    async with open_store(cfg, transport=httpx.MockTransport(handler)) as store:
        await store.fetch()
        assert [w.id for w in store.snapshot().workouts] == ["abc"]
    assert str(sent[0].url) == "http://tracker.local:5001/api/workouts"
