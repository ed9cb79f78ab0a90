"""
Backend wiring.

Builds the record store and auth provider for the configured source. The
offline demo (in-memory store with sample residents) is only used when a
caller asks for it explicitly; a failing real backend is never replaced by
sample data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mailbox_toolkit.auth import AuthProvider, StaticAuthProvider, SupabaseAuthProvider
from mailbox_toolkit.config import AppConfig
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.store import (
    InMemoryRecordStore,
    RecordStore,
    SheetsResidentSource,
    SupabaseRecordStore,
)

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.is"
DEMO_PASSWORD = "demo"

DEMO_BUILDINGS = (Building(id=1, title="Sýnishús"),)

_DEMO_ROWS = (
    ("Jón Jónsson", "101"),
    ("Anna Guðmundsdóttir", "101"),
    ("Guðrún Sigurðardóttir", "102"),
    ("Sigurður Sigurðsson", "103"),
    ("Kristín Jónsdóttir", "103"),
    ("Ólafur Ólafsson", "104"),
    ("Margrét Guðmundsdóttir", "201"),
    ("Björn Björnsson", "201"),
    ("Helga Helgadóttir", "202"),
    ("Gunnar Gunnarsson", "203"),
    ("Þóra Þórðardóttir", "204"),
    ("Einar Einarsson", "204"),
    ("Katrín Jónsdóttir", "301"),
    ("Magnús Magnússon", "302"),
    ("Sigrún Sigurðardóttir", "303"),
    ("Árni Árnason", "304"),
)


@dataclass
class Backend:
    store: RecordStore
    auth: AuthProvider
    demo: bool = False


def demo_residents(building_id: int = 1) -> list[Resident]:
    """Sample residents for the offline demo."""
    return [
        Resident(name=name, apartment_number=apartment, building_id=building_id)
        for name, apartment in _DEMO_ROWS
    ]


def create_backend(config: AppConfig, *, offline_demo: bool = False) -> Backend:
    """
    Build the store and auth provider for ``config``.

    Args:
        config: Application configuration
        offline_demo: Use an in-memory store with sample residents and a
            fixed demo login instead of the configured source

    Raises:
        ConfigError: If the configured source lacks credentials
    """
    if offline_demo:
        logger.info("Using offline demo data")
        store = InMemoryRecordStore(DEMO_BUILDINGS, demo_residents())
        auth = StaticAuthProvider({DEMO_EMAIL: DEMO_PASSWORD})
        return Backend(store=store, auth=auth, demo=True)

    config.require_source()

    if config.source == "sheets":
        logger.info(f"Using spreadsheet {config.sheets_id}")
        store = SheetsResidentSource(
            config.sheets_id, config.sheets_api_key, timeout=config.request_timeout
        )
        if config.has_supabase:
            auth: AuthProvider = SupabaseAuthProvider(
                config.supabase_url, config.supabase_key, timeout=config.request_timeout
            )
        else:
            # Spreadsheets have no accounts
            auth = StaticAuthProvider.signed_in()
        return Backend(store=store, auth=auth)

    logger.info(f"Using hosted backend {config.supabase_url}")
    auth = SupabaseAuthProvider(
        config.supabase_url, config.supabase_key, timeout=config.request_timeout
    )
    store = SupabaseRecordStore(
        config.supabase_url,
        config.supabase_key,
        auth=auth,
        timeout=config.request_timeout,
    )
    return Backend(store=store, auth=auth)
