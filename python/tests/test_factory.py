"""
Connection provider tests. supabase.acreate_client is replaced so nothing
touches the network.
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from petcare.db import factory
from petcare.db.factory import (
    PLACEHOLDER_KEY,
    PLACEHOLDER_URL,
    create_db_client,
    get_db_client,
    is_valid_url,
)

PROJECT_URL = "https://abcd1234.supabase.co"


@pytest.fixture
def acreate(monkeypatch):
    mock = AsyncMock(side_effect=lambda url, key: MagicMock(name=f"client:{url}"))
    monkeypatch.setattr("supabase.acreate_client", mock)
    return mock


class TestCreateDbClient:
    @pytest.mark.asyncio
    async def test_live_client_from_environment(self, monkeypatch, acreate):
        monkeypatch.setenv("SUPABASE_URL", PROJECT_URL)
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")

        client = await create_db_client()

        assert client.is_placeholder is False
        acreate.assert_awaited_once_with(PROJECT_URL, "anon-key")

    @pytest.mark.asyncio
    async def test_explicit_arguments_override_environment(self, monkeypatch, acreate):
        monkeypatch.setenv("SUPABASE_URL", "https://other.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "other-key")

        await create_db_client(PROJECT_URL, "anon-key")

        acreate.assert_awaited_once_with(PROJECT_URL, "anon-key")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url, key",
        [
            ("", ""),
            (PROJECT_URL, ""),
            ("", "anon-key"),
            ("not a url", "anon-key"),
            ("ftp://abcd.supabase.co", "anon-key"),
        ],
    )
    async def test_unusable_configuration_degrades_to_placeholder(self, acreate, caplog, url, key):
        with caplog.at_level(logging.WARNING, logger="petcare.db.factory"):
            client = await create_db_client(url, key)

        assert client.is_placeholder is True
        acreate.assert_awaited_once_with(PLACEHOLDER_URL, PLACEHOLDER_KEY)
        assert "SUPABASE_URL" in caplog.text

    @pytest.mark.asyncio
    async def test_rejected_credentials_degrade_to_placeholder(self, monkeypatch, caplog):
        calls = []

        async def fake_acreate(url, key):
            calls.append(url)
            if url == PROJECT_URL:
                raise ValueError("Invalid API key")
            return MagicMock()

        monkeypatch.setattr("supabase.acreate_client", fake_acreate)

        with caplog.at_level(logging.WARNING, logger="petcare.db.factory"):
            client = await create_db_client(PROJECT_URL, "bad")

        assert client.is_placeholder is True
        assert calls == [PROJECT_URL, PLACEHOLDER_URL]
        assert "Invalid API key" in caplog.text


class TestSharedClient:
    @pytest.mark.asyncio
    async def test_built_once_and_reused(self, monkeypatch, acreate):
        monkeypatch.setenv("SUPABASE_URL", PROJECT_URL)
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")

        first = await get_db_client()
        second = await get_db_client()

        assert first is second
        assert acreate.await_count == 1

    @pytest.mark.asyncio
    async def test_reset_rebuilds(self, acreate):
        first = await get_db_client()
        factory.reset_db_client()
        second = await get_db_client()

        assert first is not second
        assert acreate.await_count == 2


class TestUrlValidation:
    @pytest.mark.parametrize(
        "url, valid",
        [
            (PROJECT_URL, True),
            ("http://localhost:54321", True),
            ("localhost:54321", False),
            ("https://", False),
            ("", False),
        ],
    )
    def test_is_valid_url(self, url, valid):
        assert is_valid_url(url) is valid
