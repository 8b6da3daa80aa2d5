"""Snapshot replacement policy.

This module intentionally contains *no* payload parsing. It only decides
whether a completed fetch may replace the current slot.
"""

from __future__ import annotations


def should_accept_update(
    *,
    last_applied_id: int | None,
    incoming_id: int,
    discard_stale: bool,
) -> bool:
    """Decide whether a fetch result should replace the current snapshot.

    Request ids are issued in increasing order when a fetch starts, so a
    lower id than the last applied one means an older request finished late.

    Policy:
    - Nothing applied yet: accept.
    - ``discard_stale``: accept only ids newer than the last applied one.
    - Otherwise: last writer wins, whatever its age.
    """
    if last_applied_id is None:
        return True
    if not discard_stale:
        return True
    return incoming_id > last_applied_id
