from typing import Any, Callable

import pytest

from toml_maid import Config, Maid


@pytest.fixture
def fmt() -> Callable[..., str]:
    """Format a TOML string with the given configuration values."""

    def run(text: str, **config: Any) -> str:
        return Maid(Config(**config).process()).format_text(text)

    return run
