from datetime import datetime, timezone

import pytest
from azure.core.exceptions import ResourceNotFoundError

from core.config import StoreConfig
from core.table_store import TableStoreAdapter

CONNECTION_STRING = "DefaultEndpointsProtocol=https;AccountName=test;AccountKey=c2VjcmV0;EndpointSuffix=core.windows.net"
ACTIVE_FILTER = "PartitionKey eq 'ACTIVE'"


class FakeEntity(dict):
    """dict with the .metadata attribute azure's TableEntity carries."""

    def __init__(self, *args, metadata=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.metadata = metadata or {}


class FakeTableItem:
    def __init__(self, name):
        self.name = name


class FakeTableClient:
    def __init__(self, service, table_name):
        self._service = service
        self.table_name = table_name

    def list_entities(self, select=None):
        self._service.calls.append(("list_entities", self.table_name, None, select))
        return self._service.scan(self.table_name)

    def query_entities(self, query_filter, select=None):
        self._service.calls.append(("query_entities", self.table_name, query_filter, select))
        return self._service.scan(self.table_name, query_filter)


class FakeTableService:
    """Stands in for azure.data.tables.TableServiceClient.

    tables maps table name -> rows; filtered maps (table, filter) -> rows,
    since filter evaluation belongs to the real service.
    """

    def __init__(self, tables=None, filtered=None, error=None):
        self.tables = tables or {}
        self.filtered = filtered or {}
        self.error = error
        self.calls = []
        self.opened_with = []
        self.closed = 0

    # factory signature: TableServiceClient.from_connection_string(conn_str)
    def __call__(self, connection_string):
        self.opened_with.append(connection_string)
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed += 1
        return False

    def get_table_client(self, table_name):
        return FakeTableClient(self, table_name)

    def list_tables(self):
        self.calls.append(("list_tables",))
        if self.error is not None:
            raise self.error
        return iter([FakeTableItem(name) for name in self.tables])

    def scan(self, table_name, query_filter=None):
        # paged results are lazy in the real SDK, so errors surface on iteration
        if self.error is not None:
            raise self.error
        if table_name not in self.tables:
            raise ResourceNotFoundError(message="The table specified does not exist.")
        if query_filter is None:
            rows = self.tables[table_name]
        else:
            rows = self.filtered.get((table_name, query_filter), [])
        yield from rows


def _user(status, index):
    return FakeEntity(
        {
            "PartitionKey": status,
            "RowKey": f"user-{index:03d}",
            "email": f"user{index}@example.com",
            "age": 20 + index,
            "verified": index % 2 == 0,
        },
        metadata={
            "etag": f"W/\"{index}\"",
            "timestamp": datetime(2024, 1, 1, 12, 0, index % 60, tzinfo=timezone.utc),
        },
    )


@pytest.fixture
def active_users():
    return [_user("ACTIVE", i) for i in range(25)]


@pytest.fixture
def fake_service(active_users):
    inactive = [_user("INACTIVE", i) for i in range(25, 30)]
    return FakeTableService(
        tables={
            "Users": active_users + inactive,
            "UserAudit": [],
            "Courses": [
                FakeEntity({"PartitionKey": "COURSE", "RowKey": "1", "title": "GDPR Training"}),
            ],
        },
        filtered={("Users", ACTIVE_FILTER): active_users},
    )


@pytest.fixture
def config():
    return StoreConfig(connection_string=CONNECTION_STRING)


@pytest.fixture
def adapter(config, fake_service):
    return TableStoreAdapter(config, service_factory=fake_service)
