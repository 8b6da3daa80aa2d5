"""State/store layer.

This package is the single source of truth for the latest snapshot of each
polled resource (positions, stations, shapes, the selected trip's stop
times) and for deciding whether a completed fetch may replace it.
"""
