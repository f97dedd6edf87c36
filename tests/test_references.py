"""
Tests for reference bundle resolution.
"""
import asyncio

import pytest

from dappdeploy.errors import UnresolvedReferenceError
from dappdeploy.references import ReferenceBundle, resolve_references


class TestReferenceBundle:
    """Tests for ReferenceBundle construction."""

    def test_from_mapping(self, execution, registry, wallet, timer):
        bundle = ReferenceBundle.from_mapping({
            "execution": execution,
            "registry": registry,
            "wallet": wallet,
            "timer_service": timer,
        })

        assert bundle.execution is execution
        assert bundle.timer_service is timer
        assert bundle.names() == ["execution", "registry", "wallet", "timer_service"]

    def test_timer_service_is_optional(self, execution, registry, wallet):
        bundle = ReferenceBundle.from_mapping({
            "execution": execution,
            "registry": registry,
            "wallet": wallet,
        })

        assert bundle.timer_service is None
        assert "timer_service" not in bundle.names()

    def test_missing_reference_raises(self, execution, wallet):
        with pytest.raises(UnresolvedReferenceError, match="registry"):
            ReferenceBundle.from_mapping({"execution": execution, "wallet": wallet})

    def test_bundle_is_immutable(self, references, registry):
        with pytest.raises(AttributeError):
            references.registry = registry


class TestResolveReferences:
    """Tests for resolve_references()."""

    @pytest.mark.asyncio
    async def test_resolves_bundle(self, references, pending):
        assert await resolve_references(pending()) is references

    @pytest.mark.asyncio
    async def test_resolves_mapping(self, execution, registry, wallet):
        async def _pending():
            return {"execution": execution, "registry": registry, "wallet": wallet}

        bundle = await resolve_references(_pending())

        assert isinstance(bundle, ReferenceBundle)
        assert bundle.wallet is wallet

    @pytest.mark.asyncio
    async def test_waits_for_future(self, references):
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        loop.call_soon(future.set_result, references)

        assert await resolve_references(future) is references

    @pytest.mark.asyncio
    async def test_rejection_is_wrapped(self):
        async def _pending():
            raise ConnectionError("bridge down")

        with pytest.raises(UnresolvedReferenceError, match="bridge down") as exc_info:
            await resolve_references(_pending())

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_unsupported_type_raises(self):
        async def _pending():
            return 42

        with pytest.raises(UnresolvedReferenceError, match="int"):
            await resolve_references(_pending())
