import sys
from pathlib import Path

import pytest

# Insert the repo root (parent of the tests/ directory) at the front of sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from leaflet_widget.providers.registry import ProviderRegistry  # noqa: E402


@pytest.fixture(scope="session")
def registry():
    """The packaged provider catalog."""
    return ProviderRegistry.load_default()


@pytest.fixture
def city_data():
    """A small dataset with coordinates, a numeric column and a category."""
    return {
        "name": ["Seattle", "Denver", "Chicago", "Houston"],
        "lng": [-122.33, -104.99, -87.63, -95.37],
        "lat": [47.61, 39.74, 41.88, 29.76],
        "pop": [737015.0, 715522.0, 2746388.0, None],
        "region": ["west", "west", "midwest", "south"],
    }
