from collections.abc import Callable

import pytest

from glrs_generator import GLRegistry


@pytest.fixture
def parse_registry() -> Callable[[str], GLRegistry]:
    def _parse_registry(inner_xml: str) -> GLRegistry:
        return GLRegistry.from_xml(
            f'<?xml version="1.0" encoding="UTF-8"?>\n<registry>\n{inner_xml}\n</registry>\n'
        )

    return _parse_registry
