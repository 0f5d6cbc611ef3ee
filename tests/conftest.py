from __future__ import annotations

from pathlib import Path

import pytest


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    target_dir = (Path(config.rootpath) / 'tests' / marker).resolve()

    for item in items:
        p = Path(str(item.path)).resolve()
        if target_dir in p.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    _mark_tests_by_directory(config, items, 'unit')
    _mark_tests_by_directory(config, items, 'integration')
