"""Pytest configuration.

The validation core lives under the top-level `src` package. Putting the repository root on
`sys.path` lets tests import `src.query...` without installing the project first.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))
