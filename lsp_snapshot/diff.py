"""Character level diffing, based on Eugene W. Myers' "An O(ND) Difference
Algorithm and Its Variations" (Algorithmica, 1986)."""

import logging
import typing as t

from .structs import Change, ChangeType

logger = logging.getLogger(__name__)

Frontier = t.List[t.Optional[int]]
Step = t.Tuple[int, int, int, int]


class CircularArray:
    """A fixed size list where every integer is a valid index.

    Negative indices count from the end, just like they do for a list, but
    indices past the end wrap around instead of raising IndexError. The diff
    needs this to store diagonals ``-d..d`` in one flat list.
    """

    def __init__(self, size: int) -> None:
        assert size > 0
        self._items: Frontier = [None] * size

    def _normalize(self, key: int) -> int:
        return (len(self._items) + key) % len(self._items)

    def __getitem__(self, key: int) -> t.Optional[int]:
        return self._items[self._normalize(key)]

    def __setitem__(self, key: int, value: t.Optional[int]) -> None:
        self._items[self._normalize(key)] = value

    def __len__(self) -> int:
        return len(self._items)

    def copy(self) -> Frontier:
        return self._items[:]


def _goes_down(
    k: int, d: int, before: t.Optional[int], after: t.Optional[int]
) -> bool:
    # True when diagonal k is best reached from k + 1 (an insertion), False
    # when it's reached from k - 1 (a deletion). `before` and `after` are the
    # furthest x on k - 1 and k + 1. A missing value never compares as
    # smaller, which makes ties and holes fall back to the deletion.
    if k == -d:
        return True
    if k == d:
        return False
    return before is not None and after is not None and before < after


def shortest_edit_trace(a: str, b: str) -> t.List[Frontier]:
    """Run the greedy forward search and return every frontier it went through.

    ``trace[d]`` is the frontier as it was *before* looking at edit distance
    ``d``, so the last entry is the one the solution was built from.
    """
    n = len(a)
    m = len(b)
    max_d = n + m
    v = CircularArray(2 * max_d + 1)
    trace: t.List[Frontier] = []

    v[1] = 0
    for d in range(max_d + 1):
        trace.append(v.copy())
        for k in range(-d, d + 1, 2):
            if _goes_down(k, d, v[k - 1], v[k + 1]):
                x = v[k + 1]
            else:
                x = v[k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[k] = x

            if x >= n and y >= m:
                logger.debug("edit distance between %d and %d chars is %d", n, m, d)
                return trace

    # The loop above always finds a path by d == n + m.
    return trace


def _stored(frontier: Frontier, k: int) -> t.Optional[int]:
    # Frontiers in the trace are plain copies of the circular storage, so a
    # negative diagonal has no slot of its own when deciding the direction.
    if k < 0 or k >= len(frontier):
        return None
    return frontier[k]


def backtrack(old_string: str, new_string: str) -> t.List[Step]:
    """Walk the trace from the end of both strings back to the start.

    Returns ``(prev_x, prev_y, x, y)`` moves in reverse order, the last move
    of the edit path first.
    """
    x = len(old_string)
    y = len(new_string)
    size = 2 * (x + y) + 1
    trace = shortest_edit_trace(old_string, new_string)
    steps: t.List[Step] = []

    for d in range(len(trace) - 1, -1, -1):
        v = trace[d]
        k = x - y
        if _goes_down(k, d, _stored(v, k - 1), _stored(v, k + 1)):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = v[(size + prev_k) % size]
        assert prev_x is not None
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            steps.append((x - 1, y - 1, x, y))
            x -= 1
            y -= 1

        if d > 0:
            steps.append((prev_x, prev_y, x, y))

        x = prev_x
        y = prev_y

    return steps


def collapse(changes: t.List[Change]) -> t.List[Change]:
    """Merge neighbouring changes of the same type into runs."""
    collapsed: t.List[Change] = []
    i = 0
    while i < len(changes):
        first = changes[i]
        text = first.text
        while (
            i + 1 < len(changes)
            and changes[i].index + 1 == changes[i + 1].index
            and first.type == changes[i + 1].type
        ):
            i += 1
            text += changes[i].text

        collapsed.append(Change(type=first.type, text=text, index=first.index))
        i += 1

    return collapsed


def diff(old_string: str, new_string: str) -> t.List[Change]:
    """Compute the changes that turn `old_string` into `new_string`.

    Deletes are indexed into `old_string` and inserts into `new_string`.
    Apply them in order with `apply_changes`.
    """
    changes: t.List[Change] = []

    # The steps come last-first; the list is reversed once they're all in.
    for prev_x, prev_y, x, y in backtrack(old_string, new_string):
        if prev_x == x:
            changes.append(
                Change(type=ChangeType.INSERT, text=new_string[prev_y], index=prev_y)
            )
        elif prev_y == y:
            changes.append(
                Change(type=ChangeType.DELETE, text=old_string[prev_x], index=prev_x)
            )
        elif new_string[prev_y] != old_string[prev_x]:
            # Reversed below, so the insert ends up before the delete.
            changes.append(
                Change(type=ChangeType.DELETE, text=old_string[prev_x], index=prev_x)
            )
            changes.append(
                Change(type=ChangeType.INSERT, text=new_string[prev_y], index=prev_y)
            )

    changes.reverse()
    return collapse(changes)


def apply_changes(source: str, changes: t.Iterable[Change]) -> str:
    """Apply changes as returned by `diff` to the old string.

    Before each change the text is the new string up to the change followed
    by the rest of the old string. That makes an insert's index usable as
    is, while a delete's index has to be moved by everything inserted or
    deleted so far.
    """
    offset = 0
    for change in changes:
        if change.type == ChangeType.DELETE:
            start = change.index + offset
            assert source[start : start + len(change.text)] == change.text
            source = source[:start] + source[start + len(change.text) :]
            offset -= len(change.text)
        else:
            source = source[: change.index] + change.text + source[change.index :]
            offset += len(change.text)

    return source
