from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from voicerouter.utils.io import read_json

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def load_fixture() -> Callable[[str], Any]:
    def _load(name: str) -> Any:
        return read_json(FIXTURES / name)

    return _load
