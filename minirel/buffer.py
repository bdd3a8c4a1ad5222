"""Buffer pool manager with clock replacement and its page hash table."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import MinirelError, Status


@dataclass
class BufStats:
    """Usage counters for a buffer pool."""

    accesses: int = 0
    diskreads: int = 0
    diskwrites: int = 0

    def clear(self) -> None:
        """Reset every counter to zero."""
        self.accesses = 0
        self.diskreads = 0
        self.diskwrites = 0


@dataclass
class _Bucket:
    file: Any
    page_no: int
    frame_no: int


class BufHashTable:
    """Maps a (file, page number) pair to the frame holding that page."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("hash table size must be positive")
        self._size = size
        self._buckets: list[list[_Bucket]] = [[] for _ in range(size)]

    def _chain(self, file: Any, page_no: int) -> list[_Bucket]:
        return self._buckets[(id(file) + page_no) % self._size]

    def insert(self, file: Any, page_no: int, frame_no: int) -> None:
        """Record that the page lives in the frame; duplicates are an error."""
        chain = self._chain(file, page_no)
        if any(b.file is file and b.page_no == page_no for b in chain):
            raise MinirelError(Status.HASHTBLERROR)
        chain.insert(0, _Bucket(file, page_no, frame_no))

    def lookup(self, file: Any, page_no: int) -> int:
        """Return the frame number holding the page."""
        for bucket in self._chain(file, page_no):
            if bucket.file is file and bucket.page_no == page_no:
                return bucket.frame_no
        raise MinirelError(Status.HASHNOTFOUND)

    def remove(self, file: Any, page_no: int) -> None:
        """Forget the page; it is an error if it was not recorded."""
        chain = self._chain(file, page_no)
        for position, bucket in enumerate(chain):
            if bucket.file is file and bucket.page_no == page_no:
                del chain[position]
                return
        raise MinirelError(Status.HASHTBLERROR)

    def __contains__(self, key: tuple[Any, int]) -> bool:
        file, page_no = key
        return any(
            b.file is file and b.page_no == page_no for b in self._chain(file, page_no)
        )


@dataclass
class _Frame:
    frame_no: int
    file: Any = None
    page_no: int = -1
    pin_count: int = 0
    dirty: bool = False
    valid: bool = False
    refbit: bool = False
    data: bytearray = field(default_factory=bytearray)

    def clear(self) -> None:
        self.pin_count = 0
        self.file = None
        self.page_no = -1
        self.dirty = False
        self.valid = False

    def set(self, file: Any, page_no: int) -> None:
        self.file = file
        self.page_no = page_no
        self.pin_count = 1
        self.dirty = False
        self.valid = True
        self.refbit = True


class BufMgr:
    """A fixed pool of page frames shared by all open files."""

    def __init__(self, num_bufs: int) -> None:
        if num_bufs < 1:
            raise ValueError("buffer pool needs at least one frame")
        self.num_bufs = num_bufs
        self._frames = [_Frame(frame_no=i) for i in range(num_bufs)]
        self._table = BufHashTable(int(num_bufs * 1.2) * 2 // 2 + 1)
        self._clock_hand = num_bufs - 1
        self.stats = BufStats()

    def __enter__(self) -> "BufMgr":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.flush_all()

    def _advance_clock(self) -> None:
        self._clock_hand = (self._clock_hand + 1) % self.num_bufs

    def _alloc_frame(self) -> _Frame:
        """Pick a frame with the clock algorithm, writing back its old page."""
        chosen: Optional[_Frame] = None
        for _ in range(2 * self.num_bufs):
            self._advance_clock()
            frame = self._frames[self._clock_hand]
            if not frame.valid:
                chosen = frame
                break
            if frame.refbit:
                self.stats.accesses += 1
                frame.refbit = False
            elif frame.pin_count == 0:
                try:
                    self._table.remove(frame.file, frame.page_no)
                except MinirelError:
                    pass
                chosen = frame
                break
        if chosen is None:
            raise MinirelError(Status.BUFFEREXCEEDED)

        if chosen.dirty:
            self.stats.diskwrites += 1
            chosen.file.write_page(chosen.page_no, bytes(chosen.data))
            chosen.dirty = False
        return chosen

    def read_page(self, file: Any, page_no: int) -> bytearray:
        """Pin the page in the pool and return its buffer."""
        try:
            frame_no = self._table.lookup(file, page_no)
        except MinirelError:
            pass
        else:
            frame = self._frames[frame_no]
            frame.refbit = True
            frame.pin_count += 1
            return frame.data

        frame = self._alloc_frame()
        self.stats.diskreads += 1
        try:
            frame.data = bytearray(file.read_page(page_no))
        except MinirelError:
            frame.clear()
            raise
        frame.set(file, page_no)
        self._table.insert(file, page_no, frame.frame_no)
        return frame.data

    def unpin_page(self, file: Any, page_no: int, dirty: bool) -> None:
        """Release one pin on the page, marking it dirty if asked."""
        frame = self._frames[self._table.lookup(file, page_no)]
        if dirty:
            frame.dirty = True
        if frame.pin_count == 0:
            raise MinirelError(Status.PAGENOTPINNED)
        frame.pin_count -= 1

    def alloc_page(self, file: Any) -> tuple[int, bytearray]:
        """Allocate a new page in the file, pin it, and return (number, buffer)."""
        page_no = file.allocate_page()
        frame = self._alloc_frame()
        frame.set(file, page_no)
        frame.data = bytearray(file.page_size)
        self._table.insert(file, page_no, frame.frame_no)
        return page_no, frame.data

    def flush_file(self, file: Any) -> None:
        """Write back the file's dirty pages and drop them all from the pool."""
        for frame in self._frames:
            if frame.file is not file:
                continue
            if not frame.valid:
                raise MinirelError(Status.BADBUFFER)
            if frame.pin_count > 0:
                raise MinirelError(Status.PAGEPINNED)
            if frame.dirty:
                file.write_page(frame.page_no, bytes(frame.data))
                frame.dirty = False
            try:
                self._table.remove(file, frame.page_no)
            except MinirelError:
                pass
            frame.file = None
            frame.page_no = -1
            frame.valid = False

    def dispose_page(self, file: Any, page_no: int) -> None:
        """Drop the page from the pool and return it to the file's free list."""
        try:
            frame_no = self._table.lookup(file, page_no)
        except MinirelError:
            pass
        else:
            self._frames[frame_no].clear()
        try:
            self._table.remove(file, page_no)
        except MinirelError:
            pass
        file.dispose_page(page_no)

    def flush_all(self) -> None:
        """Write back every dirty page still held in the pool."""
        for frame in self._frames:
            if frame.valid and frame.dirty:
                frame.file.write_page(frame.page_no, bytes(frame.data))
                frame.dirty = False

    def print_self(self) -> None:
        """Print one line per frame to stdout: its text, pin count and validity."""
        out = sys.stdout
        out.write("\nPrint buffer...\n")
        for index, frame in enumerate(self._frames):
            text = bytes(frame.data).split(b"\0", 1)[0].decode("latin-1")
            out.write(f"{index}\t{text}\tpinCnt: {frame.pin_count}")
            if frame.valid:
                out.write("\tvalid\n")
            out.write("\n")

    def clear_stats(self) -> None:
        """Reset the usage counters."""
        self.stats.clear()