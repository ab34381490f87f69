"""
Shared helpers for the mvnkeeper engine and commands.

- :mod:`~mvnkeeper.utils.logger`: the ``mvnkeeper`` logger hierarchy
- :mod:`~mvnkeeper.utils.console`: Rich status lines, tables and JSON reports
- :mod:`~mvnkeeper.utils.http`: repository HTTP client
- :mod:`~mvnkeeper.utils.filesystem`: bounded reads of rules and metadata files
- :mod:`~mvnkeeper.utils.xml_utils`: namespace-agnostic element lookups
- :mod:`~mvnkeeper.utils.version_utils`: update size classification
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

from mvnkeeper.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_verbosity,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------

from mvnkeeper.utils.console import (
    PLACEHOLDER,
    colorize_update_type,
    format_status,
    get_raw_console,
    markup_or_placeholder,
    print_error,
    print_json,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Repository access
# ---------------------------------------------------------------------------

from mvnkeeper.utils.http import HTTPClient
from mvnkeeper.utils.filesystem import safe_read_file
from mvnkeeper.utils.xml_utils import child_text, find_child, iter_children, local_name

# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------

from mvnkeeper.utils.version_utils import get_update_type

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "level_for_verbosity",
    # Console
    "PLACEHOLDER",
    "print_json",
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "format_status",
    "get_raw_console",
    "reconfigure_console",
    "colorize_update_type",
    "markup_or_placeholder",
    # Repository access
    "HTTPClient",
    "safe_read_file",
    "child_text",
    "find_child",
    "iter_children",
    "local_name",
    # Versions
    "get_update_type",
]
