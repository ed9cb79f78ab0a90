"""
Multi-apartment intake.

Lets the administrator type in several apartments, each with several
names, and create them all in one store request. Within an apartment the
entry order becomes the priority order (0, 1, 2, ...).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from mailbox_toolkit import messages
from mailbox_toolkit.auth.provider import AuthProvider, require_authenticated
from mailbox_toolkit.core.errors import AuthenticationExpired, ValidationError
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.store.base import RecordStore
from mailbox_toolkit.workflow.residents import resident_issues

logger = logging.getLogger(__name__)


@dataclass
class PendingApartment:
    """
    One apartment being entered.

    Attributes:
        apartment_number: Apartment code
        names: Resident names in priority order; blank entries are ignored
    """

    apartment_number: str
    names: list[str] = field(default_factory=list)

    @property
    def clean_apartment(self) -> str:
        return self.apartment_number.strip()

    @property
    def clean_names(self) -> list[str]:
        return [n.strip() for n in self.names if n and n.strip()]


def validate_batch(
    pending: Sequence[PendingApartment],
    existing: Iterable[Resident] = (),
) -> list[str]:
    """
    Check a batch before anything is written.

    Reports missing apartment numbers, apartments without names, the same
    apartment entered twice, the same name twice in one apartment and
    names already registered in that apartment.

    Returns:
        Problems found; empty when the batch can be submitted
    """
    existing = list(existing)
    issues: list[str] = []
    seen_apartments: set[str] = set()

    for apartment in pending:
        number = apartment.clean_apartment
        if not number:
            issues.append(messages.APARTMENT_REQUIRED)
            continue
        if number in seen_apartments:
            issues.append(messages.DUPLICATE_APARTMENT.format(apartment=number))
            continue
        seen_apartments.add(number)

        names = apartment.clean_names
        if not names:
            issues.append(messages.NO_NAMES.format(apartment=number))
            continue

        seen_names: set[str] = set()
        for name in names:
            key = name.casefold()
            if key in seen_names:
                issues.append(messages.DUPLICATE_NAME.format(name=name, apartment=number))
                continue
            seen_names.add(key)
            issues.extend(resident_issues(name, number, None, existing))
    return issues


def build_residents(pending: Sequence[PendingApartment], building_id: int) -> list[Resident]:
    """Residents for a validated batch, priorities in entry order."""
    return [
        Resident(
            name=name,
            apartment_number=apartment.clean_apartment,
            priority=priority,
            building_id=building_id,
        )
        for apartment in pending
        for priority, name in enumerate(apartment.clean_names)
    ]


async def submit_batch(
    store: RecordStore,
    auth: AuthProvider,
    building_id: int,
    pending: Sequence[PendingApartment],
    existing: Iterable[Resident] = (),
) -> list[Resident]:
    """
    Validate and create a batch of residents in one request.

    Returns:
        The created residents with their ids

    Raises:
        ValidationError: If the batch has problems (nothing is written)
        AuthenticationExpired: If not signed in (the session is dropped)
        DataAccessError: If the store rejects the batch (nothing is written)
    """
    if not store.writable:
        raise ValidationError(messages.READ_ONLY_SOURCE)
    issues = validate_batch(pending, existing)
    if issues:
        raise ValidationError(issues[0], issues)

    residents = build_residents(pending, building_id)
    try:
        require_authenticated(auth)
        created = await store.create_many_residents(residents)
    except AuthenticationExpired:
        auth.expire_session()
        raise
    logger.info(f"Created {len(created)} residents in {len(pending)} apartments")
    return created
