from __future__ import annotations

import pytest

from tests.fixtures.fakes import FakeResolver, FakeSocketFactory
from ztcp.application.connection_manager import ConnectionManager
from ztcp.infrastructure.state.session_table import InMemorySessionTable


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # Settings read ".env" from the working directory and ZTCP_* from the environment
    monkeypatch.chdir(tmp_path)
    for name in (
        "ZTCP_DEFAULT_PORT",
        "ZTCP_ADDRESS_FAMILY",
        "ZTCP_OOB_INLINE",
        "ZTCP_MANAGED_LABEL",
        "ZTCP_LOG_JSON",
        "ZTCP_LOG_LEVEL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def table() -> InMemorySessionTable:
    return InMemorySessionTable()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver(
        hosts={
            "example.test": ["10.0.0.1", "10.0.0.2"],
            "ftp.example.test": ["10.0.0.21"],
            "mail.example.test": ["10.0.0.25"],
            "v6.example.test": ["2001:db8::1"],
        },
        names={"10.0.0.2": "example.test", "10.0.0.21": "ftp.example.test"},
    )


@pytest.fixture
def sockets() -> FakeSocketFactory:
    return FakeSocketFactory()


@pytest.fixture
def manager(
    table: InMemorySessionTable,
    resolver: FakeResolver,
    sockets: FakeSocketFactory,
) -> ConnectionManager:
    return ConnectionManager(table, resolver, socket_factory=sockets)
