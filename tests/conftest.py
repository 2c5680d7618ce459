"""Root conftest: shared test configuration."""

import os

# Tests never talk to a real server or touch the user's session file
os.environ.setdefault("TRACKER_API_BASE_URL", "http://tracker.test/api")
os.environ.setdefault("TRACKER_SESSION_FILE", os.devnull)
