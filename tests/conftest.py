"""Tests configurations and fixtures."""

from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING

import pytest

from loco_bdd.core import ScriptEnv, StepRegistry
from loco_bdd.reporting import RecordingReporter
from loco_bdd.settings import EngineSettings

if TYPE_CHECKING:
    from collections.abc import Callable

    from pytest_mock import MockerFixture, MockType

    from loco_bdd.extensions import Plugin


@pytest.fixture
def registry() -> StepRegistry:
    """Provide an isolated strict registry with built-in steps only.

    Steps registered during a test do not leak into other tests.
    """
    return StepRegistry(strict=True, load_plugins=False)


@pytest.fixture
def reporter() -> RecordingReporter:
    """Provide a rich reporter recording every step notification."""
    return RecordingReporter()


@pytest.fixture
def env(registry: StepRegistry, reporter: RecordingReporter) -> ScriptEnv:
    """Provide a script environment bound to the isolated registry."""
    return ScriptEnv(
        settings=EngineSettings(strict=True, load_plugins=False),
        registry=registry,
        reporter=reporter,
    )


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory for mocking `importlib.metadata.entry_points`.

    The returned factory simulates discovery of plugins in the
    `loco_bdd_steps` entry point group: loadable plugins, plugins raising
    during loading, or no entry points at all.
    """
    def patch(*plugins: 'Plugin | object', raises: Exception | None = None) -> 'MockType':
        """Patch `entry_points` with a controlled plugin configuration.

        Args:
            plugins: Objects returned by `EntryPoint.load()`.
            raises: Exception raised when `EntryPoint.load()` is called.

        Returns:
            The mock replacing `importlib.metadata.entry_points`.
        """
        entrypoints = []
        for plugin in plugins:
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = 'loco_bdd_steps'
            ep.name = 'tests'
            ep.value = 'tests.examples.plugins:example'
            ep.load.return_value = plugin
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch
