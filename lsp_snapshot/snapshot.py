import bisect
import logging
import threading
import typing as t

from .errors import SourceMapError
from .structs import JSONDict, Position, Range, RawSourceMap, Version

logger = logging.getLogger(__name__)

LINE_FEED = "\n"
CARRIAGE_RETURN = "\r"


def compute_line_offsets(
    text: str, is_at_line_start: bool, text_offset: int = 0
) -> t.List[int]:
    """Return the offsets where lines of `text` begin.

    ``\\r``, ``\\n`` and ``\\r\\n`` are all one line break. Every offset is
    shifted by `text_offset`, and `text_offset` itself is included only if
    `text` starts at the beginning of a line.
    """
    offsets = [text_offset] if is_at_line_start else []

    i = 0
    while i < len(text):
        ch = text[i]
        if ch == CARRIAGE_RETURN or ch == LINE_FEED:
            if (
                ch == CARRIAGE_RETURN
                and i + 1 < len(text)
                and text[i + 1] == LINE_FEED
            ):
                i += 1
            offsets.append(text_offset + i + 1)
        i += 1

    return offsets


@t.runtime_checkable
class SourceMapConsumer(t.Protocol):
    """Anything that can look up positions in a decoded source map."""

    def original_position_for(self, position: Position) -> t.Optional[Position]:
        """Map a zero-based generated position to the original document.

        Returns None when the generated position has no mapping.
        """
        ...


class Snapshot:
    """One revision of a document.

    The content never changes, so the line index is computed on first use
    and kept. A new revision of the document is a new Snapshot.
    """

    def __init__(self, version: Version, content: str) -> None:
        self._version = version
        self._content = content
        self._line_offsets: t.Optional[t.List[int]] = None
        # Guards the lazily computed fields.
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(version={self._version!r}, "
            f"content=<{len(self._content)} chars>)"
        )

    @property
    def version(self) -> Version:
        return self._version

    @property
    def content(self) -> str:
        return self._content

    @property
    def line_offsets(self) -> t.List[int]:
        if self._line_offsets is None:
            with self._lock:
                if self._line_offsets is None:
                    self._line_offsets = compute_line_offsets(self._content, True)
        return self._line_offsets

    @property
    def line_count(self) -> int:
        return len(self.line_offsets)

    def position_at(self, offset: int) -> Position:
        offset = max(min(offset, len(self._content)), 0)

        line_offsets = self.line_offsets
        if not line_offsets:
            return Position(line=0, column=offset)

        # bisect_right gives the first line that starts after `offset`, so the
        # line containing it is the one before that.
        line = bisect.bisect_right(line_offsets, offset) - 1
        return Position(line=line, column=offset - line_offsets[line])

    def offset_at(self, position: Position) -> int:
        line_offsets = self.line_offsets
        if position.line >= len(line_offsets):
            return len(self._content)
        elif position.line < 0:
            return 0

        line_offset = line_offsets[position.line]
        if position.line + 1 < len(line_offsets):
            next_line_offset = line_offsets[position.line + 1]
        else:
            next_line_offset = len(self._content)

        return max(min(line_offset + position.column, next_line_offset), line_offset)

    def range_at(self, start: int, end: int) -> Range:
        return Range(start=self.position_at(start), end=self.position_at(end))

    def range_length(self, change_range: Range) -> int:
        """Number of characters `change_range` covers, line breaks included."""
        return self.offset_at(change_range.end) - self.offset_at(change_range.start)

    def get_line(self, line: int) -> str:
        """Return the text of a line without its line break."""
        start = self.offset_at(Position(line=line, column=0))
        end = self.offset_at(Position(line=line + 1, column=0))
        return self._content[start:end].rstrip(CARRIAGE_RETURN + LINE_FEED)

    def get_source_offset(self, offset: int) -> int:
        return offset


class MappedSnapshot(Snapshot):
    """A generated document together with the source map pointing back to
    the single document it was generated from."""

    def __init__(
        self,
        version: Version,
        content: str,
        source_map: t.Union[RawSourceMap, JSONDict],
        consumer: SourceMapConsumer,
    ) -> None:
        if not isinstance(source_map, RawSourceMap):
            source_map = RawSourceMap.model_validate(source_map)

        sources_content = source_map.sourcesContent
        source_count = None if sources_content is None else len(sources_content)
        if source_count != 1:
            raise SourceMapError(
                "source map must embed exactly one source text, got "
                f"{'none' if source_count is None else source_count}",
                source_count=source_count,
            )
        assert sources_content is not None
        if sources_content[0] is None:
            raise SourceMapError(
                "source map has no content for its only source", source_count=1
            )

        super().__init__(version, content)
        # Copied so later changes to the caller's map can't reach this snapshot.
        self._source_map = source_map.model_copy(deep=True)
        self._original_text: str = sources_content[0]
        self._consumer = consumer
        self._original: t.Optional[Snapshot] = None

    @property
    def source_map(self) -> RawSourceMap:
        return self._source_map

    @property
    def original(self) -> Snapshot:
        if self._original is None:
            with self._lock:
                if self._original is None:
                    self._original = Snapshot(self._version, self._original_text)
        return self._original

    def get_source_offset(self, offset: int) -> int:
        generated = self.position_at(offset)
        original = self._consumer.original_position_for(generated)
        if original is None:
            logger.debug(
                "no source mapping for %d:%d in version %r, keeping offset %d",
                generated.line,
                generated.column,
                self._version,
                offset,
            )
            return offset
        return self.original.offset_at(original)


def create_snapshot(
    version: Version,
    content: str,
    source_map: t.Optional[t.Union[RawSourceMap, JSONDict]] = None,
    consumer: t.Optional[SourceMapConsumer] = None,
) -> Snapshot:
    """Build the snapshot for one revision of a document.

    Without a source map this is a plain `Snapshot`. With one it's a
    `MappedSnapshot`, which also needs a `consumer` to look positions up in
    the map: mappings aren't decoded here, so a map without a consumer
    raises `SourceMapError`.
    """
    if source_map is None:
        return Snapshot(version, content)
    if consumer is None:
        raise SourceMapError("a source map was given without a consumer for it")
    return MappedSnapshot(version, content, source_map, consumer)
