"""
Module: controller

Purpose:
    Orchestrate document generation.
    Auth gate -> Fetch -> Assemble -> Render

Key Functions:
    - generate_document(): Produce one PDF for one building
    - generate_all(): Produce every document type from a single fetch
    - render_document(): Assemble and render already-fetched residents

Key Classes:
    - GenerateRequest: What to produce and where
    - GenerateResult: What was produced
    - GenerateError: Exception for generation failures (cause chained)

Dependencies:
    - store / auth: Fetching behind the session gate
    - documents: Assembly and filenames
    - output.renderer: PDF rendering

Used By:
    - cli: generate command
    - gui.widgets.document_panel
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from mailbox_toolkit.auth.provider import AuthProvider, require_authenticated
from mailbox_toolkit.core.errors import (
    AuthenticationExpired,
    MailboxToolkitError,
)
from mailbox_toolkit.core.models import Building, Resident
from mailbox_toolkit.documents import DocumentType, assemble_document, document_filename
from mailbox_toolkit.labels import LabelLayoutConfig
from mailbox_toolkit.ordering import DEFAULT_LOCALE
from mailbox_toolkit.output.renderer import render_to_pdf
from mailbox_toolkit.store.base import RecordStore

logger = logging.getLogger(__name__)


class GenerateError(MailboxToolkitError):
    """Error during document generation. The original failure is ``__cause__``."""

    @property
    def session_expired(self) -> bool:
        return isinstance(self.__cause__, AuthenticationExpired)


@dataclass(frozen=True)
class GenerateRequest:
    """
    What to generate (immutable).

    Attributes:
        building_id: Building to print
        doc_type: Directory or labels
        output_dir: Directory the PDF is written to
        labels_per_page: Labels per sheet (labels only)
        locale: Collation locale
        printed_on: Date on the document and in the filename
        show_footer: Draw page numbers and toolkit version
        building: Building record if the caller already has it

    Example:
        >>> request = GenerateRequest(1, DocumentType.MAILBOX_LABELS, Path("out"))
    """

    building_id: int
    doc_type: DocumentType
    output_dir: Path
    labels_per_page: Optional[int] = None
    locale: str = DEFAULT_LOCALE
    printed_on: Optional[date] = None
    show_footer: bool = True
    building: Optional[Building] = None

    def __post_init__(self) -> None:
        """Validate request on construction."""
        object.__setattr__(self, "doc_type", DocumentType(self.doc_type))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        if self.labels_per_page is not None and self.labels_per_page <= 0:
            raise ValueError(f"labels_per_page must be positive: {self.labels_per_page}")

    @property
    def label_config(self) -> LabelLayoutConfig:
        return LabelLayoutConfig(labels_per_page=self.labels_per_page)


@dataclass(frozen=True)
class GenerateResult:
    """
    Generation result (immutable).

    Attributes:
        path: PDF written
        doc_type: Document type produced
        page_count: Pages in the PDF
        resident_count: Residents fetched for the building
        is_empty: True when the PDF only carries the "no data" message
        warnings: Non-fatal issues
        elapsed: Seconds spent
    """

    path: Path
    doc_type: DocumentType
    page_count: int
    resident_count: int
    is_empty: bool
    warnings: tuple[str, ...] = ()
    elapsed: float = 0.0


def render_document(
    residents: Sequence[Resident],
    building: Optional[Building],
    request: GenerateRequest,
) -> GenerateResult:
    """
    Assemble and render residents that were already fetched.

    Raises:
        GenerateError: If assembly or rendering fails
    """
    start_time = time.perf_counter()
    printed_on = request.printed_on or date.today()
    warnings: list[str] = []

    try:
        document = assemble_document(
            request.doc_type,
            residents,
            building,
            label_config=request.label_config,
            locale=request.locale,
            printed_on=printed_on,
        )
        if document.is_empty:
            warnings.append(document.empty_message)
        if request.doc_type is DocumentType.MAILBOX_LABELS:
            warnings.extend(document.layout.warnings)

        filename = document_filename(
            request.doc_type, building.title if building else None, printed_on
        )
        path = render_to_pdf(
            document, request.output_dir / filename, show_footer=request.show_footer
        )
    except (MailboxToolkitError, ValueError) as e:
        raise GenerateError(f"Failed to generate {request.doc_type.value}: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Generated {path.name} ({document.page_count} pages) in {elapsed:.2f}s")

    return GenerateResult(
        path=path,
        doc_type=request.doc_type,
        page_count=document.page_count,
        resident_count=len(residents),
        is_empty=document.is_empty,
        warnings=tuple(warnings),
        elapsed=elapsed,
    )


async def _fetch(
    store: RecordStore,
    auth: AuthProvider,
    request: GenerateRequest,
) -> tuple[Optional[Building], list[Resident]]:
    """Auth gate, building lookup and resident fetch."""
    try:
        require_authenticated(auth)
        building = request.building
        if building is None:
            buildings = await store.fetch_buildings()
            building = next((b for b in buildings if b.id == request.building_id), None)
            if building is None:
                raise GenerateError(f"Building {request.building_id} not found")
        residents = await store.fetch_residents(request.building_id)
    except AuthenticationExpired as e:
        auth.expire_session()
        raise GenerateError("Session expired") from e
    except GenerateError:
        raise
    except MailboxToolkitError as e:
        raise GenerateError(f"Failed to fetch residents: {e}") from e

    logger.info(f"Fetched {len(residents)} residents for {building.title!r}")
    return building, residents


async def generate_document(
    request: GenerateRequest,
    *,
    store: RecordStore,
    auth: AuthProvider,
) -> GenerateResult:
    """
    Generate one document for one building.

    Pipeline:
    1. Check the session
    2. Look up the building (unless given) and fetch its residents
    3. Assemble the document
    4. Render to ``output_dir / document_filename(...)``

    Raises:
        GenerateError: If any step fails; ``session_expired`` tells the
            caller to ask for a new login

    Example:
        >>> result = asyncio.run(generate_document(request, store=store, auth=auth))
        >>> result.path.name
        'postkassamerki-hatun-10-af5448-2024-03-01.pdf'
    """
    logger.info(
        f"Generating {request.doc_type.value} for building {request.building_id}"
    )
    building, residents = await _fetch(store, auth, request)
    return render_document(residents, building, request)


async def generate_all(
    request: GenerateRequest,
    *,
    store: RecordStore,
    auth: AuthProvider,
) -> list[GenerateResult]:
    """
    Generate every document type from a single fetch.

    ``request.doc_type`` is ignored.
    """
    building, residents = await _fetch(store, auth, request)
    return [
        render_document(residents, building, replace(request, doc_type=doc_type))
        for doc_type in DocumentType
    ]
