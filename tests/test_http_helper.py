"""
Tests for the aiohttp session factories.
"""

import warnings

import pytest

from http_helper import create_connectivity_session, create_lookup_session, create_probe_session


class TestSessions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("factory", [
        lambda: create_probe_session(16),
        lambda: create_lookup_session(5),
        create_connectivity_session,
    ])
    async def test_sessions_build_without_deprecated_options(self, factory):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            async with factory() as session:
                assert session.connector.force_close

    @pytest.mark.asyncio
    async def test_probe_session_limit_follows_concurrency(self):
        async with create_probe_session(32) as session:
            assert session.connector.limit == 32
        async with create_probe_session() as session:
            assert session.connector.limit == 0
