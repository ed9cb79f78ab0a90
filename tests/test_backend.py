"""
Tests for choosing the store and auth provider from configuration.
"""

import asyncio

import pytest

from mailbox_toolkit.auth import StaticAuthProvider, SupabaseAuthProvider
from mailbox_toolkit.backend import DEMO_EMAIL, DEMO_PASSWORD, create_backend, demo_residents
from mailbox_toolkit.config import AppConfig, ConfigError
from mailbox_toolkit.store import InMemoryRecordStore, SheetsResidentSource, SupabaseRecordStore

SUPABASE = {"supabase_url": "https://project.supabase.co", "supabase_key": "anon"}


class TestCreateBackend:
    """Tests for create_backend()."""

    def test_offline_demo(self):
        backend = create_backend(AppConfig(), offline_demo=True)
        assert backend.demo
        assert isinstance(backend.store, InMemoryRecordStore)
        assert not backend.auth.is_authenticated
        assert asyncio.run(backend.auth.login(DEMO_EMAIL, DEMO_PASSWORD)) is not None

    def test_demo_residents_cover_building(self):
        backend = create_backend(AppConfig(), offline_demo=True)
        residents = asyncio.run(backend.store.fetch_residents(1))
        assert len(residents) == len(demo_residents())

    def test_supabase(self):
        backend = create_backend(AppConfig(**SUPABASE))
        assert isinstance(backend.store, SupabaseRecordStore)
        assert isinstance(backend.auth, SupabaseAuthProvider)
        assert not backend.demo

    def test_sheets_without_accounts(self):
        config = AppConfig(source="sheets", sheets_id="abc", sheets_api_key="k")
        backend = create_backend(config)
        assert isinstance(backend.store, SheetsResidentSource)
        assert isinstance(backend.auth, StaticAuthProvider)
        assert backend.auth.is_authenticated

    def test_sheets_with_supabase_login(self):
        config = AppConfig(source="sheets", sheets_id="abc", sheets_api_key="k", **SUPABASE)
        backend = create_backend(config)
        assert isinstance(backend.auth, SupabaseAuthProvider)

    def test_missing_credentials(self):
        with pytest.raises(ConfigError):
            create_backend(AppConfig())
