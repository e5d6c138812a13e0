"""Tests for persistence backends and the profile store."""

from __future__ import annotations

from pathlib import Path

import pytest

from clarity_canvas.core.config import PersistenceConfig
from clarity_canvas.exceptions import PersistenceFailure, ProfileNotFound
from clarity_canvas.models import FieldPath
from clarity_canvas.persistence import (
    FilePersistenceBackend,
    IPersistenceBackend,
    MemoryPersistenceBackend,
    ProfileStore,
    create_backend,
)
from clarity_canvas.persistence.s3_backend import S3PersistenceBackend
from clarity_canvas.schema import build_profile
from tests.fakes.fake_persistence import FailingPersistenceBackend


class TestFileBackend:
    def test_save_and_load(self, tmp_path: Path) -> None:
        backend = FilePersistenceBackend(tmp_path)
        backend.save("user-1", '{"id": "user-1"}')
        assert backend.load("user-1") == '{"id": "user-1"}'
        assert (tmp_path / "user-1.json").is_file()

    def test_overwrite_leaves_no_temp_files(self, tmp_path: Path) -> None:
        backend = FilePersistenceBackend(tmp_path)
        backend.save("user-1", "first")
        backend.save("user-1", "second")
        assert backend.load("user-1") == "second"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["user-1.json"]

    def test_load_missing_raises_key_error(self, tmp_path: Path) -> None:
        backend = FilePersistenceBackend(tmp_path)
        with pytest.raises(KeyError):
            backend.load("ghost")

    def test_exists_and_delete(self, tmp_path: Path) -> None:
        backend = FilePersistenceBackend(tmp_path)
        backend.save("a", "x")
        assert backend.exists("a")
        backend.delete("a")
        assert not backend.exists("a")
        backend.delete("a")

    def test_list_keys_with_prefix(self, tmp_path: Path) -> None:
        backend = FilePersistenceBackend(tmp_path)
        for key in ("team-b", "team-a", "solo"):
            backend.save(key, "{}")
        assert backend.list_keys() == ["solo", "team-a", "team-b"]
        assert backend.list_keys("team-") == ["team-a", "team-b"]

    def test_slashes_in_key_are_flattened(self, tmp_path: Path) -> None:
        backend = FilePersistenceBackend(tmp_path)
        backend.save("org/user", "{}")
        assert (tmp_path / "org_user.json").is_file()

    def test_creates_base_directory(self, tmp_path: Path) -> None:
        FilePersistenceBackend(tmp_path / "nested" / "store")
        assert (tmp_path / "nested" / "store").is_dir()

    def test_satisfies_protocol(self, tmp_path: Path) -> None:
        assert isinstance(FilePersistenceBackend(tmp_path), IPersistenceBackend)


class TestMemoryBackend:
    def test_round_trip(self) -> None:
        backend = MemoryPersistenceBackend()
        backend.save("k", "v")
        assert backend.load("k") == "v"
        assert backend.list_keys() == ["k"]

    def test_missing(self) -> None:
        with pytest.raises(KeyError):
            MemoryPersistenceBackend().load("nope")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MemoryPersistenceBackend(), IPersistenceBackend)


class TestProfileStore:
    def test_round_trip(self, store: ProfileStore) -> None:
        profile = build_profile("user-1", name="Ada")
        store.save_profile(profile)
        loaded = store.load_profile("user-1")
        assert loaded == profile
        assert store.exists("user-1")
        assert store.list_profiles() == ["user-1"]

    def test_round_trip_through_files(self, tmp_path: Path) -> None:
        store = ProfileStore(FilePersistenceBackend(tmp_path))
        profile = build_profile("user-1")
        store.save_profile(profile)
        loaded = store.load_profile("user-1")
        assert loaded.get_field(FieldPath("individual", "background", "career")) is not None
        assert loaded == profile

    def test_missing_profile(self, store: ProfileStore) -> None:
        with pytest.raises(ProfileNotFound):
            store.load_profile("ghost")

    def test_missing_profile_is_key_error(self, store: ProfileStore) -> None:
        with pytest.raises(KeyError):
            store.load_profile("ghost")

    def test_corrupt_document(self) -> None:
        backend = MemoryPersistenceBackend()
        backend.save("user-1", "{not json")
        with pytest.raises(PersistenceFailure, match="corrupt"):
            ProfileStore(backend).load_profile("user-1")

    def test_save_failure_wrapped(self) -> None:
        store = ProfileStore(FailingPersistenceBackend())
        with pytest.raises(PersistenceFailure, match="disk full"):
            store.save_profile(build_profile("user-1"))

    def test_delete(self, store: ProfileStore) -> None:
        store.save_profile(build_profile("user-1"))
        store.delete_profile("user-1")
        assert not store.exists("user-1")


class TestCreateBackend:
    def test_memory(self) -> None:
        backend = create_backend(PersistenceConfig(backend="memory"))
        assert isinstance(backend, MemoryPersistenceBackend)

    def test_file(self, tmp_path: Path) -> None:
        backend = create_backend(PersistenceConfig(backend="file", store_path=tmp_path / "p"))
        assert isinstance(backend, FilePersistenceBackend)
        assert (tmp_path / "p").is_dir()


class _NoSuchKey(Exception):
    pass


class _ClientError(Exception):
    pass


class FakeS3Client:
    """Just enough of the boto3 S3 client surface for the backend."""

    class exceptions:
        NoSuchKey = _NoSuchKey
        ClientError = _ClientError

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.put_kwargs: list[dict[str, object]] = []

    def put_object(self, **kwargs: object) -> None:
        self.put_kwargs.append(kwargs)
        self.objects[str(kwargs["Key"])] = kwargs["Body"]  # type: ignore[assignment]

    def get_object(self, Bucket: str, Key: str) -> dict[str, object]:
        if Key not in self.objects:
            raise _NoSuchKey(Key)
        body = self.objects[Key]

        class _Body:
            def read(self) -> bytes:
                return body

        return {"Body": _Body()}

    def head_object(self, Bucket: str, Key: str) -> None:
        if Key not in self.objects:
            raise _ClientError("404")

    def delete_object(self, Bucket: str, Key: str) -> None:
        self.objects.pop(Key, None)

    def get_paginator(self, name: str) -> FakeS3Client:
        return self

    def paginate(self, Bucket: str, Prefix: str) -> list[dict[str, object]]:
        return [{"Contents": [{"Key": k} for k in self.objects if k.startswith(Prefix)]}]


class TestS3Backend:
    def test_round_trip_under_prefix(self) -> None:
        client = FakeS3Client()
        backend = S3PersistenceBackend("bucket", prefix="profiles/", client=client)
        backend.save("user-1", "{}")
        assert "profiles/user-1.json" in client.objects
        assert backend.load("user-1") == "{}"
        assert backend.exists("user-1")
        assert backend.list_keys() == ["user-1"]

    def test_missing(self) -> None:
        backend = S3PersistenceBackend("bucket", client=FakeS3Client())
        assert not backend.exists("ghost")
        with pytest.raises(KeyError):
            backend.load("ghost")

    def test_kms_encryption(self) -> None:
        client = FakeS3Client()
        S3PersistenceBackend("bucket", kms_key_id="key-1", client=client).save("a", "{}")
        assert client.put_kwargs[0]["ServerSideEncryption"] == "aws:kms"
        assert client.put_kwargs[0]["SSEKMSKeyId"] == "key-1"

    def test_store_wraps_missing_profile(self) -> None:
        store = ProfileStore(S3PersistenceBackend("bucket", client=FakeS3Client()))
        with pytest.raises(ProfileNotFound):
            store.load_profile("ghost")
