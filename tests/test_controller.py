"""
Tests for the document generation pipeline.
"""

import asyncio
from datetime import date

import pytest
from pypdf import PdfReader

from mailbox_toolkit.controller import (
    GenerateError,
    GenerateRequest,
    generate_all,
    generate_document,
    render_document,
)
from mailbox_toolkit.core.errors import AuthenticationExpired, DataAccessError
from mailbox_toolkit.documents import DocumentType

PRINTED_ON = date(2024, 3, 1)


@pytest.fixture
def request_for(tmp_path):
    def make(doc_type=DocumentType.MAILBOX_LABELS, building_id=1, **kwargs):
        return GenerateRequest(
            building_id=building_id,
            doc_type=doc_type,
            output_dir=tmp_path,
            printed_on=PRINTED_ON,
            **kwargs,
        )
    return make


class TestGenerateRequest:
    """Tests for request validation."""

    def test_doc_type_from_value(self, tmp_path):
        request = GenerateRequest(1, "directory", str(tmp_path))
        assert request.doc_type is DocumentType.RESIDENT_DIRECTORY
        assert request.output_dir == tmp_path

    def test_invalid_labels_per_page(self, tmp_path):
        with pytest.raises(ValueError):
            GenerateRequest(1, DocumentType.MAILBOX_LABELS, tmp_path, labels_per_page=0)

    def test_label_config(self, tmp_path):
        request = GenerateRequest(1, DocumentType.MAILBOX_LABELS, tmp_path, labels_per_page=8)
        assert request.label_config.per_page == 8


class TestGenerateDocument:
    """Tests for generate_document()."""

    def test_labels(self, store, auth, request_for, tmp_path):
        result = asyncio.run(generate_document(request_for(), store=store, auth=auth))

        assert result.path == tmp_path / "postkassamerki-hatun-10-af5448-2024-03-01.pdf"
        assert result.path.exists()
        assert result.page_count == 1
        assert result.resident_count == 5
        assert not result.is_empty
        assert len(PdfReader(str(result.path)).pages) == 1

    def test_directory(self, store, auth, request_for):
        request = request_for(DocumentType.RESIDENT_DIRECTORY)
        result = asyncio.run(generate_document(request, store=store, auth=auth))
        assert result.path.name == "ibualisti-hatun-10-af5448-2024-03-01.pdf"
        assert result.doc_type is DocumentType.RESIDENT_DIRECTORY

    def test_labels_per_page(self, store, auth, request_for):
        request = request_for(labels_per_page=2)
        result = asyncio.run(generate_document(request, store=store, auth=auth))
        assert result.page_count == 2

    def test_given_building_skips_lookup(self, store, auth, request_for, building):
        request = request_for(building=building)
        asyncio.run(generate_document(request, store=store, auth=auth))
        assert [op for op, _ in store.calls] == ["fetch_residents"]

    def test_empty_building_warns(self, store, auth, request_for):
        from mailbox_toolkit.core.models import Building

        store.add_building(Building(2, "Tómt hús"))
        request = request_for(building_id=2)
        result = asyncio.run(generate_document(request, store=store, auth=auth))
        assert result.is_empty
        assert result.page_count == 1
        assert result.warnings

    def test_unknown_building(self, store, auth, request_for):
        with pytest.raises(GenerateError):
            asyncio.run(generate_document(request_for(building_id=99), store=store, auth=auth))

    def test_signed_out(self, store, signed_out_auth, request_for):
        with pytest.raises(GenerateError) as exc_info:
            asyncio.run(generate_document(request_for(), store=store, auth=signed_out_auth))
        assert exc_info.value.session_expired
        assert store.calls == []

    def test_token_rejected(self, store, auth, request_for):
        store.fail("fetch_residents", AuthenticationExpired("JWT expired"))
        with pytest.raises(GenerateError) as exc_info:
            asyncio.run(generate_document(request_for(), store=store, auth=auth))
        assert exc_info.value.session_expired
        assert not auth.is_authenticated

    def test_fetch_failure(self, store, auth, request_for):
        store.fail("fetch_residents", DataAccessError("offline"))
        with pytest.raises(GenerateError) as exc_info:
            asyncio.run(generate_document(request_for(), store=store, auth=auth))
        assert isinstance(exc_info.value.__cause__, DataAccessError)
        assert not exc_info.value.session_expired


class TestGenerateAll:
    """Tests for generate_all()."""

    def test_one_fetch_two_documents(self, store, auth, request_for):
        results = asyncio.run(generate_all(request_for(), store=store, auth=auth))
        assert [r.doc_type for r in results] == list(DocumentType)
        assert all(r.path.exists() for r in results)
        assert [op for op, _ in store.calls].count("fetch_residents") == 1


class TestRenderDocument:
    """Tests for rendering already-fetched residents."""

    def test_without_building(self, residents, request_for):
        result = render_document(residents, None, request_for())
        assert result.path.name == "postkassamerki-2024-03-01.pdf"

    def test_render_failure_wrapped(self, residents, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        request = GenerateRequest(1, DocumentType.MAILBOX_LABELS, blocker, printed_on=PRINTED_ON)
        with pytest.raises(GenerateError):
            render_document(residents, None, request)
