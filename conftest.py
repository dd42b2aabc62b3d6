"""Pytest configuration for the WeCom relay."""

import os
import sys
from pathlib import Path

root = Path(__file__).parent
for path in (root / "shared", root / "services" / "relay_service"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# ``app.main`` builds the module-level app from the environment on import
os.environ.setdefault("AUTH_KEY", "test-auth-key")
os.environ.setdefault("WECOM_CID", "test-corp")
os.environ.setdefault("WECOM_SECRET", "test-corp-secret")
os.environ.setdefault("WECOM_AID", "1000002")
