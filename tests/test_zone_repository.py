"""Tests for zone storage: Supabase store, local file, and their combination."""

import json

import httpx
import pytest

from database.ZoneRepository import ZoneRepository
from database.ZoneStore import LocalZoneFile, SupabaseZoneStore
from database.errors import ZoneStoreError, ZoneWriteError


# =============================================================================
# Supabase store
# =============================================================================


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Records the query builder chain the store issues."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []

    def select(self, columns):
        self.calls.append(("select", columns))
        return self

    def eq(self, column, value):
        self.calls.append(("eq", column, value))
        return self

    def maybe_single(self):
        self.calls.append(("maybe_single",))
        return self

    def upsert(self, row, on_conflict=None):
        self.calls.append(("upsert", row, on_conflict))
        return self

    def execute(self):
        if self.client.error is not None:
            raise self.client.error
        return self.client.response


class FakeSupabase:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.queries = []

    def table(self, name):
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query


def test_supabase_load_selects_by_key(valid_zone):
    supabase = FakeSupabase(response=FakeResponse({"data": valid_zone}))

    data = SupabaseZoneStore(supabase, "dashboard_data").load("class-9")

    assert data == valid_zone
    query = supabase.queries[0]
    assert query.table == "dashboard_data"
    assert ("eq", "id", "class-9") in query.calls


@pytest.mark.parametrize("response", [None, FakeResponse(None), FakeResponse({"data": None})])
def test_supabase_load_missing_row(response):
    store = SupabaseZoneStore(FakeSupabase(response=response), "dashboard_data")

    assert store.load("class-9") is None


def test_supabase_save_upserts_on_id(valid_zone):
    supabase = FakeSupabase(response=FakeResponse([]))

    SupabaseZoneStore(supabase, "dashboard_data").save("class-9", valid_zone)

    assert supabase.queries[0].calls == [
        ("upsert", {"id": "class-9", "data": valid_zone}, "id")
    ]


def test_supabase_transport_error_is_wrapped():
    request = httpx.Request("GET", "https://project.supabase.co")
    store = SupabaseZoneStore(
        FakeSupabase(error=httpx.ConnectError("down", request=request)), "dashboard_data"
    )

    with pytest.raises(ZoneStoreError):
        store.load("class-9")
    with pytest.raises(ZoneStoreError):
        store.save("class-9", {})


# =============================================================================
# Local file
# =============================================================================


def test_local_file_round_trip_is_pretty_printed(local_file, valid_zone):
    local_file.save(valid_zone)

    text = local_file.path.read_text()
    assert text == json.dumps(valid_zone, indent=2)
    assert local_file.load() == valid_zone


def test_local_file_missing_is_none(local_file):
    assert local_file.load() is None


def test_local_file_creates_parent_directories(tmp_path):
    nested = LocalZoneFile(tmp_path / "data" / "zones" / "folder-structure.json")

    nested.save({"categories": [], "videos": []})

    assert nested.path.exists()


def test_local_file_rejects_garbage(local_file):
    local_file.path.write_text("{not json")

    with pytest.raises(ZoneStoreError):
        local_file.load()


# =============================================================================
# Repository
# =============================================================================


def test_read_prefers_remote(repository, remote, local_file, valid_zone):
    remote.rows["default"] = valid_zone
    local_file.save({"categories": [], "videos": []})

    assert repository.read("default") == valid_zone


def test_read_falls_back_to_local_when_row_missing(repository, local_file, valid_zone):
    local_file.save(valid_zone)

    assert repository.read("default") == valid_zone


def test_read_falls_back_to_local_on_remote_error(repository, remote, local_file, valid_zone):
    remote.fail_reads = True
    local_file.save(valid_zone)

    assert repository.read("default") == valid_zone


def test_read_nothing_anywhere_is_none(repository):
    assert repository.read("default") is None


def test_read_corrupt_local_file_is_none(local_file):
    local_file.path.write_text("[]")

    assert ZoneRepository(local=local_file).read("default") is None


def test_write_goes_to_both_sinks(repository, remote, local_file, valid_zone):
    written = repository.write("class-9", valid_zone)

    assert written == ["remote", "local"]
    assert remote.rows["class-9"] == valid_zone
    assert local_file.load() == valid_zone


def test_write_survives_remote_failure(repository, remote, local_file, valid_zone):
    remote.fail_writes = True

    assert repository.write("class-9", valid_zone) == ["local"]
    assert local_file.load() == valid_zone


def test_write_survives_local_failure(tmp_path, remote, valid_zone):
    repository = ZoneRepository(remote=remote, local=LocalZoneFile(tmp_path))

    assert repository.write("class-9", valid_zone) == ["remote"]


def test_write_local_only_failure_raises(tmp_path, valid_zone):
    repository = ZoneRepository(local=LocalZoneFile(tmp_path))

    with pytest.raises(ZoneWriteError, match="Supabase not configured"):
        repository.write("class-9", valid_zone)


def test_write_all_sinks_failing_raises(tmp_path, remote, valid_zone):
    remote.fail_writes = True
    repository = ZoneRepository(remote=remote, local=LocalZoneFile(tmp_path))

    with pytest.raises(ZoneWriteError):
        repository.write("class-9", valid_zone)


def test_write_without_sinks_raises(valid_zone):
    with pytest.raises(ZoneWriteError):
        ZoneRepository().write("class-9", valid_zone)


@pytest.mark.parametrize("data", [[1, 2], "text", 3])
def test_supabase_load_non_object_is_missing(data):
    store = SupabaseZoneStore(
        FakeSupabase(response=FakeResponse({"data": data})), "dashboard_data"
    )

    assert store.load("class-9") is None


def test_read_non_object_remote_falls_back_to_local(repository, remote, local_file, valid_zone):
    remote.rows["default"] = [1, 2]
    local_file.save(valid_zone)

    assert repository.read("default") == valid_zone


def test_read_non_object_remote_without_local_is_none(remote):
    remote.rows["default"] = [1, 2]

    assert ZoneRepository(remote=remote).read("default") is None
