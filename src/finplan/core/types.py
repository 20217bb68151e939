"""Shared type aliases used across finplan."""

from pathlib import Path
from typing import Any

# Nested plain mappings: config sections, parsed plan documents
ConfigDict = dict[str, Any]

PathLike = str | Path
