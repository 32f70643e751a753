import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


@pytest.fixture(autouse=True)
def clear_luarmor_environment(monkeypatch):
    for name in list(os.environ):
        if name.startswith("LUARMOR_"):
            monkeypatch.delenv(name, raising=False)
    yield
