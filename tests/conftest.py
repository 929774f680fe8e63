import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from tests.helpers import RecordingRenderer


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()
