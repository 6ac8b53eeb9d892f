"""State diffing between two fingerprint snapshots."""

from .models import ChangeSet, Snapshot


def compare_state(old: Snapshot, new: Snapshot) -> ChangeSet:
    """Compare two snapshots.

    Pure function: no I/O, no side effects. Swapping ``old`` and ``new``
    swaps ``added`` and ``deleted`` and leaves ``modified`` unchanged.

    Args:
        old: Previous snapshot.
        new: Current snapshot.

    Returns:
        ChangeSet of added, deleted and modified paths.
    """
    old_keys = old.keys()
    new_keys = new.keys()

    added = frozenset(new_keys - old_keys)
    deleted = frozenset(old_keys - new_keys)
    modified = frozenset(
        path for path in old_keys & new_keys if new[path] != old[path]
    )

    return ChangeSet(added=added, deleted=deleted, modified=modified)
