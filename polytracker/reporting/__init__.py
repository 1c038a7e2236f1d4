"""
Terminal and file output for aligned tables and leaderboards.

Modules
-------
formatters : format_comparison_table() / format_leaderboard() — plain-text
             tables for ``typer.echo()``.
export     : records_to_frame() (pandas) plus CSV/JSON writers.
"""
