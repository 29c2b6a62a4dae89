"""Root conftest — shared test configuration."""

import os

# Keep tests deterministic and quiet regardless of the developer's .env
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_LEVEL", "WARNING")
