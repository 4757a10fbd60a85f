from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    # A school morning, before the 07:30 start.
    return datetime(2026, 2, 2, 7, 20, 0)
