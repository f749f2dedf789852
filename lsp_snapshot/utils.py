import typing as t

from .diff import diff
from .snapshot import Snapshot
from .structs import ChangeType, Range, TextDocumentContentChangeEvent, TextEdit


def calculate_change_events(
    old_text: str, new_text: str
) -> t.List[TextDocumentContentChangeEvent]:
    """Describe the edit from `old_text` to `new_text` as incremental events.

    Each event's range refers to the text as it is after every event before
    it has been applied, which is what ``textDocument/didChange`` expects.
    """
    events = []

    adjusted_text = old_text
    index_offset = 0

    for change in diff(old_text, new_text):
        # A snapshot per step is cheap: the line index is only built when the
        # first position is asked for.
        snapshot = Snapshot(version=0, content=adjusted_text)

        if change.type == ChangeType.INSERT:
            start = change.index
            end = start
            replacement = change.text
            index_offset += len(change.text)
        else:
            start = change.index + index_offset
            end = start + len(change.text)
            replacement = ""
            index_offset -= len(change.text)

        events.append(
            TextDocumentContentChangeEvent.range_change(
                change_start=snapshot.position_at(start),
                change_end=snapshot.position_at(end),
                change_text=replacement,
                range_length=end - start,
            )
        )

        # Now we'll make the adjusted text actually reflect the changes.
        adjusted_text = adjusted_text[:start] + replacement + adjusted_text[end:]

    assert adjusted_text == new_text
    return events


def calculate_text_edits(old_text: str, new_text: str) -> t.List[TextEdit]:
    """Describe the edit from `old_text` to `new_text` as ``TextEdit``\\ s.

    Unlike change events, every range here refers to `old_text` itself.
    """
    snapshot = Snapshot(version=0, content=old_text)
    edits = []
    index_offset = 0

    for change in diff(old_text, new_text):
        if change.type == ChangeType.INSERT:
            # Inserts are indexed into the new text; undo what has been
            # inserted and deleted before this point to get back to the old.
            position = snapshot.position_at(change.index - index_offset)
            edits.append(
                TextEdit(range=Range(start=position, end=position), newText=change.text)
            )
            index_offset += len(change.text)
        else:
            edits.append(
                TextEdit(
                    range=snapshot.range_at(
                        change.index, change.index + len(change.text)
                    ),
                    newText="",
                )
            )
            index_offset -= len(change.text)

    return edits


def apply_text_edits(text: str, edits: t.Sequence[TextEdit]) -> str:
    """Apply edits whose ranges all refer to `text`, in the order given."""
    snapshot = Snapshot(version=0, content=text)
    pieces = []
    last_end = 0
    for edit in edits:
        start = snapshot.offset_at(edit.range.start)
        end = snapshot.offset_at(edit.range.end)
        assert start >= last_end, "overlapping or unsorted text edits"
        pieces.append(text[last_end:start])
        pieces.append(edit.newText)
        last_end = end
    pieces.append(text[last_end:])
    return "".join(pieces)
