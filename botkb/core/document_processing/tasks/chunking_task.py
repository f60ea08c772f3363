"""
Streaming text chunker.

Splits an unbounded text stream into overlapping chunks of bounded size
while holding at most one chunk plus one incoming piece in memory.

Dependencies: None
System role: Chunking stage of document ingestion pipeline
"""

from typing import Iterable, Iterator

BREAK_CHARACTERS = (".", "!", "?", "\n")


class StreamingChunker:
    """
    Incremental chunker with sentence-aware break points.

    Text is appended to a single buffer. Once the buffer reaches
    ``max_chunk_size`` a chunk is cut at the last sentence terminator or
    newline in the second half of the window, or hard-cut at the window end
    when there is none. The last ``overlap`` characters before the cut seed
    the next chunk.

    An instance is single-use: it holds the state of one source stream.
    """

    def __init__(self, max_chunk_size: int = 500, overlap: int = 100) -> None:
        """
        Args:
            max_chunk_size: Target upper bound for a chunk in characters
            overlap: Characters carried from the end of one chunk into the next

        Raises:
            ValueError: When overlap is negative or not smaller than max_chunk_size
        """
        if max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")
        if overlap < 0 or overlap >= max_chunk_size:
            raise ValueError(
                f"overlap must be in [0, {max_chunk_size}), got {overlap}"
            )
        self.max_chunk_size = max_chunk_size
        self.overlap = overlap
        self._buffer = ""
        self._last_overlap = ""

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    @property
    def last_overlap(self) -> str:
        """Overlap seed carried from the most recently emitted chunk."""
        return self._last_overlap

    def feed(self, text: str) -> None:
        """Append raw text, newlines included, to the buffer."""
        self._buffer += text

    def add_line(self, line: str) -> None:
        """Append one line followed by a newline separator."""
        self._buffer += line + "\n"

    def has_complete_chunk(self) -> bool:
        return len(self._buffer) >= self.max_chunk_size

    def next_chunk(self) -> str:
        """
        Cut the next chunk from the buffer.

        Returns:
            str: Trimmed chunk text, possibly blank

        Raises:
            ValueError: When the buffer has not reached max_chunk_size
        """
        if not self.has_complete_chunk():
            raise ValueError("no complete chunk buffered")

        buffer = self._buffer
        break_point = self._find_break_point(buffer)

        tail_start = max(0, break_point - self.overlap)
        self._last_overlap = buffer[tail_start:break_point]
        self._buffer = buffer[tail_start:]
        return buffer[:break_point].strip()

    def last_chunk(self) -> str:
        """Drain the buffer at end of stream, returning the trimmed remainder."""
        remainder = self._buffer.strip()
        self._buffer = ""
        self._last_overlap = ""
        return remainder

    def chunk(self, pieces: Iterable[str]) -> Iterator[str]:
        """
        Lazily chunk a stream of text pieces.

        Pieces are appended verbatim, so line-oriented sources should keep
        their newline characters. Blank chunks are never yielded.

        Args:
            pieces: Iterable of text fragments in source order

        Yields:
            str: Non-blank trimmed chunks in order
        """
        for piece in pieces:
            self.feed(piece)
            while self.has_complete_chunk():
                text = self.next_chunk()
                if text:
                    yield text

        text = self.last_chunk()
        if text:
            yield text

    def _find_break_point(self, buffer: str) -> int:
        end = min(len(buffer), self.max_chunk_size)
        window_start = self.max_chunk_size // 2

        found = max(buffer.rfind(char, window_start, end) for char in BREAK_CHARACTERS)
        break_point = found + 1 if found >= 0 else end

        # A break inside the overlap would re-emit the same text forever
        if break_point <= self.overlap:
            break_point = end
        return break_point
