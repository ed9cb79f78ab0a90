"""
Module: workflow.residents

Purpose:
    Create, edit and delete residents of one building. Every change is
    validated locally first, then written through the record store,
    followed by a reload so the cached list always mirrors the store.

Key Classes:
    - ResidentManager: CRUD workflow for one building

Key Functions:
    - resident_issues(): Local validation shared with intake

Used By:
    - gui.widgets.resident_table
    - cli
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from mailbox_toolkit import messages
from mailbox_toolkit.auth.provider import AuthProvider, require_authenticated
from mailbox_toolkit.core.errors import AuthenticationExpired, ValidationError
from mailbox_toolkit.core.models import Resident
from mailbox_toolkit.core.utils.serialization import UPDATABLE_FIELDS
from mailbox_toolkit.store.base import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resident_issues(
    name: Optional[str],
    apartment_number: Optional[str],
    priority: Any,
    existing: Iterable[Resident] = (),
    *,
    ignore_id: Optional[int] = None,
) -> list[str]:
    """
    Validate one resident's fields.

    Args:
        name: Display name (required)
        apartment_number: Apartment code (required)
        priority: None or a non-negative int
        existing: Residents already in the building
        ignore_id: Resident being edited (not a duplicate of itself)

    Returns:
        Problems found; empty when valid
    """
    issues: list[str] = []
    name = (name or "").strip()
    apartment_number = (apartment_number or "").strip()

    if not name or not apartment_number:
        issues.append(messages.REQUIRED_FIELDS)
    if priority is not None and (
        isinstance(priority, bool) or not isinstance(priority, int) or priority < 0
    ):
        issues.append(messages.INVALID_PRIORITY)

    if name and apartment_number:
        for other in existing:
            if other.id is not None and other.id == ignore_id:
                continue
            if (
                other.apartment_number == apartment_number
                and other.name.strip().casefold() == name.casefold()
            ):
                issues.append(
                    messages.DUPLICATE_NAME.format(name=name, apartment=apartment_number)
                )
                break
    return issues


class ResidentManager:
    """
    Resident CRUD for one building.

    Args:
        store: Record store
        auth: Session gate; expired sessions are dropped here
        building_id: Building being managed
        on_change: Called with the reloaded residents after every change

    Example:
        >>> manager = ResidentManager(store, auth, building_id=1)
        >>> asyncio.run(manager.add("Anna", "101"))
        >>> [r.name for r in manager.residents]
        ['Anna']
    """

    def __init__(
        self,
        store: RecordStore,
        auth: AuthProvider,
        building_id: int,
        *,
        on_change: Optional[Callable[[list[Resident]], None]] = None,
    ):
        self._store = store
        self._auth = auth
        self.building_id = building_id
        self.on_change = on_change
        self._residents: list[Resident] = []

    @property
    def residents(self) -> list[Resident]:
        """Residents as of the last load (store order)."""
        return list(self._residents)

    def find(self, resident_id: int) -> Optional[Resident]:
        return next((r for r in self._residents if r.id == resident_id), None)

    async def _call(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run a store operation behind the auth gate."""
        try:
            require_authenticated(self._auth)
            return await operation()
        except AuthenticationExpired:
            self._auth.expire_session()
            raise

    def _require_writable(self) -> None:
        if not self._store.writable:
            raise ValidationError(messages.READ_ONLY_SOURCE)

    async def load(self) -> list[Resident]:
        """Fetch the building's residents and cache them."""
        self._residents = await self._call(
            lambda: self._store.fetch_residents(self.building_id)
        )
        return self.residents

    async def _reload_and_notify(self) -> list[Resident]:
        residents = await self.load()
        if self.on_change is not None:
            self.on_change(residents)
        return residents

    async def add(
        self,
        name: str,
        apartment_number: str,
        priority: Optional[int] = None,
        exclude: bool = False,
    ) -> Resident:
        """
        Create a resident.

        Raises:
            ValidationError: Missing fields, bad priority or duplicate name
            AuthenticationExpired / DataAccessError: From the store
        """
        self._require_writable()
        issues = resident_issues(name, apartment_number, priority, self._residents)
        if issues:
            raise ValidationError(issues[0], issues)

        resident = Resident(
            name=name.strip(),
            apartment_number=apartment_number.strip(),
            priority=priority,
            building_id=self.building_id,
            exclude_from_directory=exclude,
        )
        created = await self._call(lambda: self._store.create_resident(resident))
        logger.info(f"Added {created!r}")
        await self._reload_and_notify()
        return created

    async def edit(self, resident_id: int, **fields: Any) -> Resident:
        """
        Update some fields of a resident.

        Args:
            resident_id: Resident to update
            **fields: Any of name, apartment_number, priority,
                exclude_from_directory

        Raises:
            ValidationError: Unknown resident or field, or invalid values
        """
        self._require_writable()
        current = self.find(resident_id)
        if current is None:
            raise ValidationError(messages.UNKNOWN_RESIDENT.format(id=resident_id))
        unknown = sorted(set(fields) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(unknown)}")

        for key in ("name", "apartment_number"):
            if isinstance(fields.get(key), str):
                fields[key] = fields[key].strip()

        issues = resident_issues(
            fields.get("name", current.name),
            fields.get("apartment_number", current.apartment_number),
            fields.get("priority", current.priority),
            self._residents,
            ignore_id=resident_id,
        )
        if issues:
            raise ValidationError(issues[0], issues)

        updated = await self._call(lambda: self._store.update_resident(resident_id, fields))
        logger.info(f"Updated {updated!r}")
        await self._reload_and_notify()
        return updated

    async def remove(self, resident_id: int) -> None:
        """Delete a resident."""
        self._require_writable()
        await self._call(lambda: self._store.delete_resident(resident_id))
        logger.info(f"Removed resident {resident_id}")
        await self._reload_and_notify()
