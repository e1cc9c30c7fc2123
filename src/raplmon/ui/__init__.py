"""User-facing surfaces: the power report and the CLI.

The CLI can be run directly:
    python -m raplmon.ui.cli

Note: We don't export CLI components from __init__.py to avoid
module loading issues when running as a script.
"""

__all__ = []  # CLI is run directly, no exports needed
