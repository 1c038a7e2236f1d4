"""
Comparison engine: pure, synchronous transforms over already-fetched data.

Modules
-------
alignment   : MergedRecord + align() — merges per-source forecast series and
              resolutions into one chronologically ordered table.
leaderboard : BestModel + select_best() / as_table() / check_sorted_by_mae()
              over backend-ranked accuracy summaries.
"""
