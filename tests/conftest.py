"""Shared fakes for the remote filesystem and hosting APIs."""
import asyncio
import itertools

import pytest

from puter_deploy.errors import RemoteAPIError


def not_found(path):
    return RemoteAPIError(
        f"Entry not found: {path}",
        code="subject_does_not_exist",
        status=404,
        payload={"error": {"code": "subject_does_not_exist", "message": "not found"}},
    )


class FakeFileSystem:
    """In-memory remote filesystem keyed by normalized path."""

    def __init__(self):
        self.entries = {}
        self.writes = []
        self.mkdir_calls = []
        self._uids = itertools.count(1)

    def add_dir(self, path, uid=None):
        uid = uid or f"dir-{next(self._uids)}"
        self.entries[path] = {"uid": uid, "path": path, "is_dir": True}
        return uid

    def add_file(self, path):
        self.entries[path] = {"uid": f"file-{next(self._uids)}", "path": path, "is_dir": False}

    async def stat(self, path):
        await asyncio.sleep(0)
        if path not in self.entries:
            raise not_found(path)
        return dict(self.entries[path])

    async def mkdir(self, path, create_missing_parents=True):
        await asyncio.sleep(0)
        self.mkdir_calls.append((path, create_missing_parents))
        if path in self.entries:
            raise RemoteAPIError("An entry with that name already exists.", code="item_with_same_name_exists")
        self.add_dir(path)
        return dict(self.entries[path])

    async def write(self, path, data, overwrite=True, dedupe_name=False, create_missing_parents=True):
        await asyncio.sleep(0)
        self.writes.append(
            {
                "path": path,
                "data": data,
                "overwrite": overwrite,
                "dedupe_name": dedupe_name,
                "create_missing_parents": create_missing_parents,
            }
        )
        self.add_file(path)
        return dict(self.entries[path])


class FakeHosting:
    """In-memory subdomain bindings resolved against a FakeFileSystem."""

    def __init__(self, fs):
        self.fs = fs
        self.sites = {}
        self.calls = []

    def bind(self, subdomain, root_uid, root_path=None):
        self.sites[subdomain] = {
            "subdomain": subdomain,
            "root_dir": {"uid": root_uid, "path": root_path},
        }

    async def get(self, subdomain):
        self.calls.append(("get", subdomain))
        if subdomain not in self.sites:
            raise RemoteAPIError("Subdomain not found", status=404)
        return self.sites[subdomain]

    async def create(self, subdomain, root_dir):
        self.calls.append(("create", subdomain, root_dir))
        self.bind(subdomain, self.fs.entries[root_dir]["uid"], root_dir)
        return self.sites[subdomain]

    async def update(self, subdomain, root_dir):
        self.calls.append(("update", subdomain, root_dir))
        self.bind(subdomain, self.fs.entries[root_dir]["uid"], root_dir)
        return self.sites[subdomain]


@pytest.fixture
def fake_fs():
    return FakeFileSystem()


@pytest.fixture
def fake_hosting(fake_fs):
    return FakeHosting(fake_fs)
