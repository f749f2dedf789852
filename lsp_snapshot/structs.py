import enum
import typing as t
from typing_extensions import Literal

from pydantic import BaseModel, Field

JSONDict = t.Dict[str, t.Any]

Version = t.Union[int, str]


# Sorting tip:  sorted(positions, key=(lambda p: p.as_tuple()))
class Position(BaseModel):
    # NB: These are both zero-based.
    line: int
    column: int

    def as_tuple(self) -> t.Tuple[int, int]:
        return (self.line, self.column)


class Range(BaseModel):
    start: Position
    end: Position


class ChangeType(enum.Enum):
    INSERT = "insert"
    DELETE = "delete"


class Change(BaseModel):
    type: ChangeType
    text: str = Field(min_length=1)
    # Offset into the old string for deletes, into the new string for inserts.
    index: int

    def __len__(self) -> int:
        return len(self.text)

    @property
    def is_insert(self) -> bool:
        return self.type == ChangeType.INSERT

    @property
    def is_delete(self) -> bool:
        return self.type == ChangeType.DELETE


class RawSourceMap(BaseModel):
    """The JSON shape of a revision 3 source map.

    Only ``sourcesContent`` is looked at here, everything else is handed to
    whatever decodes the mappings.
    """

    version: Literal[3] = 3
    file: t.Optional[str] = None
    sourceRoot: t.Optional[str] = None
    sources: t.List[str] = []
    sourcesContent: t.Optional[t.List[t.Optional[str]]] = None
    names: t.List[str] = []
    mappings: str = ""


class TextDocumentContentChangeEvent(BaseModel):
    text: str
    range: t.Optional[Range]
    rangeLength: t.Optional[int]  # deprecated, use .range

    def model_dump(self, **kwargs: t.Any) -> t.Dict[str, t.Any]:
        d = super().model_dump(**kwargs)

        # some servers require un-filled values to be absent
        if self.rangeLength is None:
            del d["rangeLength"]
        if self.range is None:
            del d["range"]
        return d

    @classmethod
    def range_change(
        cls,
        change_start: Position,
        change_end: Position,
        change_text: str,
        range_length: int,
    ) -> "TextDocumentContentChangeEvent":
        """
        Create a TextDocumentContentChangeEvent reflecting the given changes.

        `range_length` is how many characters the range covers, line breaks
        included. Nota bene: If you're creating a list of
        TextDocumentContentChangeEvent based on many changes, both the range and
        its length must refer to the text after all previous change events
        happened (`Snapshot.range_length` computes it).
        """
        change_range = Range(start=change_start, end=change_end)
        return cls(
            range=change_range,
            rangeLength=range_length,
            text=change_text,
        )

    @classmethod
    def whole_document_change(
        cls, change_text: str
    ) -> "TextDocumentContentChangeEvent":
        return cls(text=change_text, range=None, rangeLength=None)


class TextEdit(BaseModel):
    range: Range
    newText: str
