"""Pytest configuration for the D++ test suite."""

import sys
from pathlib import Path

# Make the dpp package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))
