"""Pack Planner - gear catalog and hike packing-list weights."""

from .utils.constants import APP_VERSION

__version__ = APP_VERSION
