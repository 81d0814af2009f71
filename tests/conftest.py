"""Pytest configuration for the Tahoma Shutters tests."""

from __future__ import annotations

import asyncio
import inspect
import sys
from pathlib import Path

import pytest

_TESTS_PATH = Path(__file__).resolve().parent
for path in (_TESTS_PATH.parent, _TESTS_PATH):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from fakes import FakeGateway, FakeHost  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register markers used throughout the test suite."""

    config.addinivalue_line(
        "markers", "asyncio: mark coroutine tests to execute via asyncio loop"
    )


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute coroutine tests within a dedicated event loop."""

    test_function = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_function):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name]
        for name in pyfuncitem._fixtureinfo.argnames
    }
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_function(**funcargs))
    finally:
        asyncio.set_event_loop(None)
        loop.close()
    return True


@pytest.fixture
def fake_host() -> FakeHost:
    """Provide a recording accessory host."""

    return FakeHost()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """Provide an in-memory gateway."""

    return FakeGateway()
