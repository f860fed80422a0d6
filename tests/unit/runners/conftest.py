"""Fixtures for runner tests with a faked process layer."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, Mock, patch

import pytest

from pkgtest_runner.models.descriptor import SuiteTarget
from pkgtest_runner.reporters.base import Reporter
from pkgtest_runner.testing.factories import SuiteTargetFactory
from pkgtest_runner.testing.fakes import ScannerTree, fake_exec


@pytest.fixture
def exec_mock() -> Iterator[AsyncMock]:
    """Patch process execution for runners; everything passes by default."""
    with patch(
        "pkgtest_runner.runners.base.exec_command", new_callable=AsyncMock
    ) as mock:
        mock.side_effect = fake_exec()
        yield mock


@pytest.fixture
def reporter() -> Mock:
    """Create mock reporter."""
    return Mock(spec=Reporter)


@pytest.fixture
def target() -> SuiteTarget:
    """Environment variant used by runner tests."""
    return SuiteTargetFactory.build(mod_type="commonjs", pkg_manager="npm")


@pytest.fixture
def scanners() -> ScannerTree:
    """Create a chain of mocked log file scanners."""
    return ScannerTree()
