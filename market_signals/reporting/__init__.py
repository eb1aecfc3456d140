"""Terminal reporting for CLI commands.

Modules
-------
formatters — format_signal_report(), format_asset_list() — plain strings.
"""
