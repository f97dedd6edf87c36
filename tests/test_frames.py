"""
Tests for deployment frames.

Tests frame immutability, derivation, and serialization.
"""
from pathlib import Path
from uuid import UUID

import pytest

from dappdeploy.errors import DeployIOError, ForeignHandleError, NotFoundError, RemoteCallError
from dappdeploy.pipeline.frames import (
    BundleFrame,
    DeployRequestFrame,
    ErrorFrame,
    ErrorType,
    InstallationFrame,
    IssuerFrame,
)
from dappdeploy.pipeline.processors import make_keyword_record
from dappdeploy.services import RemoteHandle


class TestFrameBase:
    """Tests for base Frame behaviour."""

    def test_frame_has_auto_generated_id(self):
        frame = DeployRequestFrame(source_path=Path("src/contracts/proxy.js"))
        assert isinstance(frame.id, UUID)

    def test_frame_is_immutable(self):
        frame = BundleFrame(source="x", module_format="nestedEvaluate")
        with pytest.raises(AttributeError):
            frame.source = "y"

    def test_derive_tracks_lineage(self):
        original = InstallationFrame(installation=RemoteHandle(id="inst-1"))
        derived = original.derive(contract_name="time-release")

        assert derived.id != original.id
        assert derived.source_frame_id == original.id
        assert derived.installation == original.installation

    def test_bundle_to_dict_omits_source(self):
        frame = BundleFrame(source="a" * 500, module_format="nestedEvaluate")
        data = frame.to_dict()

        assert data["frame_type"] == "BundleFrame"
        assert data["source_length"] == 500
        assert "source" not in data

    def test_issuer_frame_lists_keywords(self):
        frame = IssuerFrame(
            installation=RemoteHandle(id="inst-1"),
            issuer_petname="moola",
            issuer_keyword_record=make_keyword_record(RemoteHandle(id="issuer-1")),
        )

        assert frame.to_dict()["keywords"] == ["Tip"]


class TestErrorFrame:
    """Tests for ErrorFrame classification."""

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (RemoteCallError("rejected", "execution", "install"), ErrorType.REMOTE),
            (NotFoundError("moola", []), ErrorType.NOT_FOUND),
            (DeployIOError("missing", "/tmp/x"), ErrorType.IO),
            (ForeignHandleError("stale", "register"), ErrorType.FOREIGN_HANDLE),
            (ValueError("boom"), ErrorType.INTERNAL),
        ],
    )
    def test_classifies_exceptions(self, exc, expected):
        frame = ErrorFrame.from_exception(exc, processor_name="install")

        assert frame.error_type == expected
        assert frame.is_fatal is True
        assert frame.exception_class == type(exc).__name__

    def test_links_source_frame(self):
        source = BundleFrame(source="x", module_format="nestedEvaluate")
        frame = ErrorFrame.from_exception(
            RemoteCallError("rejected", "execution", "install"),
            processor_name="install",
            source_frame=source,
        )

        assert frame.source_frame_id == source.id
        assert frame.to_dict()["original_frame_type"] == "BundleFrame"
