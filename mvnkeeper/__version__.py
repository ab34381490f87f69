"""
mvnkeeper version information.

Single source of truth for the package version, read by packaging, the
``--version`` CLI flag and the HTTP User-Agent.
"""

from __future__ import annotations

__version__ = "0.1.0.dev0"

#: Human-readable version (for CLI banners).
VERSION_STRING = f"mvnkeeper {__version__}"
