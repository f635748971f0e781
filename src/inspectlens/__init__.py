"""InspectLens: Query and track static-analysis inspection results."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
