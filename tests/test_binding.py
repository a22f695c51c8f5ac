"""Tests for subdomain binding reconciliation."""
from unittest.mock import AsyncMock, Mock

import pytest

from puter_deploy.errors import RemoteAPIError
from puter_deploy.models import BindingAction
from puter_deploy.orchestrator.binding import BindingReconciler


class TestBindingReconciler:
    @pytest.mark.asyncio
    async def test_created_then_unchanged(self, fake_fs, fake_hosting):
        uid = fake_fs.add_dir("/me/site")
        reconciler = BindingReconciler(fake_hosting)

        first = await reconciler.reconcile("blog", "/me/site", uid)
        second = await reconciler.reconcile("blog", "/me/site", uid)

        assert first.action is BindingAction.CREATED
        assert second.action is BindingAction.UNCHANGED
        assert first.binding.root_directory_uid == uid
        assert [c[0] for c in fake_hosting.calls] == ["get", "create", "get"]

    @pytest.mark.asyncio
    async def test_bound_elsewhere_is_updated(self, fake_fs, fake_hosting):
        old_uid = fake_fs.add_dir("/me/old")
        new_uid = fake_fs.add_dir("/me/new")
        fake_hosting.bind("blog", old_uid, "/me/old")

        result = await BindingReconciler(fake_hosting).reconcile("blog", "/me/new", new_uid)

        assert result.action is BindingAction.UPDATED
        assert result.binding.root_directory_uid == new_uid
        assert fake_hosting.sites["blog"]["root_dir"]["uid"] == new_uid
        assert ("update", "blog", "/me/new") in fake_hosting.calls

    @pytest.mark.asyncio
    async def test_identity_is_uid_not_path(self, fake_fs, fake_hosting):
        # same path string, directory was recreated with a new uid
        new_uid = fake_fs.add_dir("/me/site")
        fake_hosting.bind("blog", "stale-uid", "/me/site")

        result = await BindingReconciler(fake_hosting).reconcile("blog", "/me/site", new_uid)

        assert result.action is BindingAction.UPDATED

    @pytest.mark.asyncio
    async def test_renamed_directory_with_same_uid_is_unchanged(self, fake_hosting):
        fake_hosting.bind("blog", "dir-7", "/me/old-name")

        result = await BindingReconciler(fake_hosting).reconcile("blog", "/me/new-name", "dir-7")

        assert result.action is BindingAction.UNCHANGED
        assert [c[0] for c in fake_hosting.calls] == ["get"]

    @pytest.mark.asyncio
    async def test_lookup_failure_propagates(self):
        hosting = Mock()
        error = RemoteAPIError("permission denied", code="forbidden", status=403)
        hosting.get = AsyncMock(side_effect=error)
        hosting.create = AsyncMock()
        hosting.update = AsyncMock()

        with pytest.raises(RemoteAPIError) as exc_info:
            await BindingReconciler(hosting).reconcile("blog", "/me/site", "dir-1")

        assert exc_info.value is error
        hosting.create.assert_not_called()
        hosting.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_without_payload_falls_back_to_target(self):
        hosting = Mock()
        hosting.get = AsyncMock(side_effect=RemoteAPIError("not found", code="entity_not_found"))
        hosting.create = AsyncMock(return_value=None)

        result = await BindingReconciler(hosting).reconcile("blog", "/me/site", "dir-1")

        assert result.action is BindingAction.CREATED
        assert result.binding.subdomain == "blog"
        assert result.binding.root_directory_uid == "dir-1"
        assert result.binding.root_directory_path == "/me/site"
