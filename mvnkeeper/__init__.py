"""
mvnkeeper: rule-aware Maven dependency and plugin update checks.

mvnkeeper decides which newer versions of declared Maven dependencies and
plugins are worth offering, honouring a rules file that binds
``groupId:artifactId`` wildcard patterns to comparison methods and
version-ignore lists.
"""

from __future__ import annotations

from mvnkeeper.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__description__ = "Rule-aware update checks for Maven dependencies and plugins."

__all__ = ["__version__"]
