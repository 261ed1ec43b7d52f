"""Pytest configuration for the tinytac test suite."""

import sys
from pathlib import Path

# Add the repository root to path so tests run against the working tree
sys.path.insert(0, str(Path(__file__).parent.parent))
