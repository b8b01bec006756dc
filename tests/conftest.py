import logging
from typing import Iterator

import pytest

from rawcookie.log import package_logger

pytest_plugins = ("pytester",)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    # RAWCOOKIE_DEBUG attaches a handler at import; keep caplog assertions
    # independent of it.
    level = package_logger.level
    package_logger.setLevel(logging.NOTSET)
    yield
    package_logger.setLevel(level)
