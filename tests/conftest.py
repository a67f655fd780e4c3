"""Pytest configuration.

The repository uses a flat layout and may be tested without installing the package. This conftest
ensures tests can import from the `coursequest.*` namespace when running `pytest` locally.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure `import coursequest...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))
