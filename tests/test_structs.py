import pytest
from pydantic import ValidationError

import lsp_snapshot as lsp


def test_as_tuple():
    assert lsp.Position(line=123, column=4).as_tuple() == (123, 4)


def test_positions_sort_by_tuple():
    positions = [
        lsp.Position(line=2, column=0),
        lsp.Position(line=0, column=9),
        lsp.Position(line=0, column=1),
    ]
    assert [p.as_tuple() for p in sorted(positions, key=lambda p: p.as_tuple())] == [
        (0, 1),
        (0, 9),
        (2, 0),
    ]


def test_change_range():
    # "foo\nbar2 --> "fOO\nbar"
    assert lsp.TextDocumentContentChangeEvent.range_change(
        lsp.Position(line=0, column=1),
        lsp.Position(line=0, column=3),
        "OO",
        len("oo"),
    ) == lsp.TextDocumentContentChangeEvent(
        range=lsp.Range(
            start=lsp.Position(line=0, column=1),  # f|oo
            end=lsp.Position(line=0, column=3),  # foo|
        ),
        rangeLength=len("oo"),
        text="OO",
    )

    # "foo\nbar\nbaz" --> "foLOLz"
    assert lsp.TextDocumentContentChangeEvent.range_change(
        lsp.Position(line=0, column=2),
        lsp.Position(line=2, column=2),
        "LOL",
        len("o\nbar\nba"),
    ) == lsp.TextDocumentContentChangeEvent(
        range=lsp.Range(
            start=lsp.Position(line=0, column=2),  # fo|o
            end=lsp.Position(line=2, column=2),  # ba|z
        ),
        rangeLength=len("o\nbar\nba"),
        text="LOL",
    )


def test_whole_document_change_dumps_without_range():
    event = lsp.TextDocumentContentChangeEvent.whole_document_change("hello")
    assert event.model_dump() == {"text": "hello"}


def test_change_from_dict():
    change = lsp.Change.model_validate({"type": "delete", "text": "abc", "index": 4})
    assert change.type == lsp.ChangeType.DELETE
    assert change.is_delete
    assert not change.is_insert
    assert len(change) == 3
    assert change.model_dump(mode="json") == {
        "type": "delete",
        "text": "abc",
        "index": 4,
    }


def test_change_text_cannot_be_empty():
    with pytest.raises(ValidationError):
        lsp.Change(type=lsp.ChangeType.INSERT, text="", index=0)


def test_change_type_must_be_known():
    with pytest.raises(ValidationError):
        lsp.Change.model_validate({"type": "replace", "text": "a", "index": 0})


def test_raw_source_map_defaults():
    source_map = lsp.RawSourceMap.model_validate({"mappings": ";;AAAA"})
    assert source_map.version == 3
    assert source_map.sources == []
    assert source_map.sourcesContent is None


def test_raw_source_map_only_version_3():
    with pytest.raises(ValidationError):
        lsp.RawSourceMap.model_validate({"version": 2, "mappings": ""})
