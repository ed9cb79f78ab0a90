import os
import pytest
import sys
from pathlib import Path

# Run Qt headless unless a platform is chosen explicitly
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to sys.path so we can import mailbox_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from mailbox_toolkit.auth import StaticAuthProvider
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.store import InMemoryRecordStore


ADMIN_EMAIL = "admin@example.is"
ADMIN_PASSWORD = "leyndarmal"


# Common test fixtures
@pytest.fixture
def building():
    """Building used by most workflow tests."""
    return Building(id=1, title="Hátún 10")


@pytest.fixture
def residents():
    """Residents of three apartments, no priorities."""
    return [
        Resident(name="Jón Jónsson", apartment_number="101", building_id=1),
        Resident(name="Anna Guðmundsdóttir", apartment_number="101", building_id=1),
        Resident(name="Guðrún Sigurðardóttir", apartment_number="102", building_id=1),
        Resident(name="Þóra Þórðardóttir", apartment_number="201", building_id=1),
        Resident(name="Árni Árnason", apartment_number="201", building_id=1),
    ]


@pytest.fixture
def store(building, residents):
    """In-memory store seeded with ``building`` and ``residents`` (ids 1..5)."""
    return InMemoryRecordStore([building], residents)


@pytest.fixture
def auth():
    """Provider with an open administrator session."""
    return StaticAuthProvider.signed_in(ADMIN_EMAIL)


@pytest.fixture
def signed_out_auth():
    """Provider that accepts ADMIN_EMAIL / ADMIN_PASSWORD but is not signed in."""
    return StaticAuthProvider({ADMIN_EMAIL: ADMIN_PASSWORD})


def _make_residents(*specs, apartment="101", building_id=1):
    """
    Build residents from (name, priority) pairs or bare names.

    Ids are assigned 1..n in argument order.
    """
    result = []
    for i, spec in enumerate(specs, start=1):
        name, priority = spec if isinstance(spec, tuple) else (spec, None)
        result.append(
            Resident(
                name=name,
                apartment_number=apartment,
                id=i,
                priority=priority,
                building_id=building_id,
            )
        )
    return result


@pytest.fixture
def make_residents():
    """Factory: make_residents("A", ("B", 2), apartment="102")."""
    return _make_residents
