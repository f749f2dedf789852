import pytest

import lsp_snapshot as lsp


def apply_events(text, events):
    for event in events:
        snapshot = lsp.Snapshot(version=0, content=text)
        start = snapshot.offset_at(event.range.start)
        end = snapshot.offset_at(event.range.end)
        assert end - start == event.rangeLength
        text = text[:start] + event.text + text[end:]
    return text


def test_change_events_for_replace():
    events = lsp.calculate_change_events("On Monday morning", "On Monday evening")
    assert events == [
        lsp.TextDocumentContentChangeEvent(
            range=lsp.Range(
                start=lsp.Position(line=0, column=10),
                end=lsp.Position(line=0, column=10),
            ),
            rangeLength=0,
            text="eve",
        ),
        lsp.TextDocumentContentChangeEvent(
            range=lsp.Range(
                start=lsp.Position(line=0, column=13),
                end=lsp.Position(line=0, column=16),
            ),
            rangeLength=3,
            text="",
        ),
    ]


def test_change_events_for_identical_texts():
    assert lsp.calculate_change_events("same\ntext", "same\ntext") == []


def test_change_events_span_lines():
    events = lsp.calculate_change_events("foo\nbar\nbaz", "foo\nbaz")
    assert apply_events("foo\nbar\nbaz", events) == "foo\nbaz"
    for event in events:
        assert event.text == "" or event.rangeLength == 0


@pytest.mark.parametrize(
    "old, new",
    [
        ("", "hello\nworld\n"),
        ("hello\nworld\n", ""),
        ("import os\nimport sys\n", "import sys\nimport os\nimport re\n"),
        ("a\r\nb\r\nc", "a\r\nB\r\nc\r\n"),
        ("def f():\n    return 1\n", "def f(x):\n    return x + 1\n"),
    ],
)
def test_change_events_reproduce_new_text(old, new):
    assert apply_events(old, lsp.calculate_change_events(old, new)) == new


def test_text_edits_refer_to_old_text():
    edits = lsp.calculate_text_edits("On Monday morning", "On Monday evening")
    assert edits == [
        lsp.TextEdit(
            range=lsp.Range(
                start=lsp.Position(line=0, column=10),
                end=lsp.Position(line=0, column=10),
            ),
            newText="eve",
        ),
        lsp.TextEdit(
            range=lsp.Range(
                start=lsp.Position(line=0, column=10),
                end=lsp.Position(line=0, column=13),
            ),
            newText="",
        ),
    ]


@pytest.mark.parametrize(
    "old, new",
    [
        ("xa", "ay"),
        ("first line\nsecond line\n", "first line\nline two\nthird line\n"),
        ("a\rb\rc", "a\nb\nc"),
        ("", "new"),
    ],
)
def test_text_edits_reproduce_new_text(old, new):
    assert lsp.apply_text_edits(old, lsp.calculate_text_edits(old, new)) == new


def test_apply_text_edits_rejects_overlaps():
    edits = [
        lsp.TextEdit(
            range=lsp.Range(
                start=lsp.Position(line=0, column=0), end=lsp.Position(line=0, column=3)
            ),
            newText="x",
        ),
        lsp.TextEdit(
            range=lsp.Range(
                start=lsp.Position(line=0, column=1), end=lsp.Position(line=0, column=2)
            ),
            newText="y",
        ),
    ]
    with pytest.raises(AssertionError):
        lsp.apply_text_edits("abcdef", edits)
