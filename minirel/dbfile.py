"""Paged database files and the table of open files."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Optional

from .errors import MinirelError, Status

DEFAULT_PAGE_SIZE = 1024

_HEADER = struct.Struct("<iii")
_NEXT_FREE = struct.Struct("<i")


@dataclass
class _Header:
    next_free: int
    first_page: int
    num_pages: int

    @classmethod
    def unpack(cls, page: bytes) -> "_Header":
        return cls(*_HEADER.unpack_from(page))

    def pack_into(self, page: bytes) -> bytes:
        buf = bytearray(page)
        _HEADER.pack_into(buf, 0, self.next_free, self.first_page, self.num_pages)
        return bytes(buf)


class File:
    """A database file made of fixed-size pages; page 0 is the header."""

    def __init__(self, name: str, db: "DB") -> None:
        self.name = name
        self._db = db
        self.open_count = 0
        self._handle: Optional[BinaryIO] = None

    @property
    def page_size(self) -> int:
        return self._db.page_size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, File):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"File({self.name!r}, open_count={self.open_count})"

    @staticmethod
    def _create(name: str, page_size: int) -> None:
        try:
            fd = os.open(name, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o666)
        except FileExistsError:
            raise MinirelError(Status.FILEEXISTS) from None
        except OSError:
            raise MinirelError(Status.UNIXERR) from None
        header = _Header(next_free=-1, first_page=-1, num_pages=1)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(header.pack_into(bytes(page_size)))
        except OSError:
            raise MinirelError(Status.UNIXERR) from None

    @staticmethod
    def _destroy(name: str) -> None:
        try:
            os.remove(name)
        except OSError:
            raise MinirelError(Status.UNIXERR) from None

    def _open(self) -> None:
        if self.open_count == 0:
            try:
                self._handle = open(self.name, "r+b", buffering=0)
            except OSError:
                raise MinirelError(Status.UNIXERR) from None
        self.open_count += 1

    def _close(self) -> None:
        if self.open_count <= 0:
            raise MinirelError(Status.FILENOTOPEN)
        self.open_count -= 1
        if self.open_count == 0:
            manager = self._db.buffer_manager
            if manager is not None:
                try:
                    manager.flush_file(self)
                except MinirelError:
                    pass
            handle, self._handle = self._handle, None
            try:
                handle.close()
            except OSError:
                raise MinirelError(Status.UNIXERR) from None

    def _read(self, page_no: int) -> bytes:
        if self._handle is None:
            raise MinirelError(Status.UNIXERR)
        try:
            self._handle.seek(page_no * self.page_size)
            data = self._handle.read(self.page_size)
        except OSError:
            raise MinirelError(Status.UNIXERR) from None
        if data is None or len(data) != self.page_size:
            raise MinirelError(Status.UNIXERR)
        return data

    def _write(self, page_no: int, data: bytes) -> None:
        if self._handle is None:
            raise MinirelError(Status.UNIXERR)
        try:
            self._handle.seek(page_no * self.page_size)
            written = self._handle.write(data)
        except OSError:
            raise MinirelError(Status.UNIXERR) from None
        if written != self.page_size:
            raise MinirelError(Status.UNIXERR)

    def allocate_page(self) -> int:
        """Take a page from the free list, or extend the file; return its number."""
        raw = self._read(0)
        header = _Header.unpack(raw)
        if header.next_free != -1:
            page_no = header.next_free
            (header.next_free,) = _NEXT_FREE.unpack_from(self._read(page_no))
        else:
            page_no = header.num_pages
            self._write(page_no, bytes(self.page_size))
            header.num_pages += 1
            if header.first_page == -1:
                header.first_page = page_no
        self._write(0, header.pack_into(raw))
        return page_no

    def dispose_page(self, page_no: int) -> None:
        """Put a page on the free list; the first data page cannot be disposed."""
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        raw = self._read(0)
        header = _Header.unpack(raw)
        if header.first_page == page_no or page_no >= header.num_pages:
            raise MinirelError(Status.BADPAGENO)
        self._read(page_no)
        away = bytearray(self.page_size)
        _NEXT_FREE.pack_into(away, 0, header.next_free)
        header.next_free = page_no
        self._write(page_no, bytes(away))
        self._write(0, header.pack_into(raw))

    def read_page(self, page_no: int) -> bytes:
        """Return the contents of a data page."""
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        return self._read(page_no)

    def write_page(self, page_no: int, data: bytes) -> None:
        """Overwrite a data page with exactly one page of bytes."""
        if data is None:
            raise MinirelError(Status.BADPAGEPTR)
        data = bytes(data)
        if len(data) != self.page_size:
            raise MinirelError(Status.BADPAGEPTR)
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        self._write(page_no, data)

    def first_page(self) -> int:
        """Return the number of the first data page, or -1 if there is none."""
        return _Header.unpack(self._read(0)).first_page


class DB:
    """Creates, destroys, opens and closes database files."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if _HEADER.size >= page_size:
            raise ValueError(
                f"page size {page_size} must exceed header size {_HEADER.size}"
            )
        self.page_size = page_size
        self.buffer_manager = None
        self._open_files: dict[str, File] = {}

    def create_file(self, name) -> None:
        name = os.fspath(name)
        if not name:
            raise MinirelError(Status.BADFILE)
        if name in self._open_files:
            raise MinirelError(Status.FILEEXISTS)
        File._create(name, self.page_size)

    def destroy_file(self, name) -> None:
        name = os.fspath(name)
        if not name:
            raise MinirelError(Status.BADFILE)
        if name in self._open_files:
            raise MinirelError(Status.FILEOPEN)
        File._destroy(name)

    def open_file(self, name) -> File:
        """Open a file, sharing the object if it is already open."""
        name = os.fspath(name)
        if not name:
            raise MinirelError(Status.BADFILE)
        existing = self._open_files.get(name)
        if existing is not None:
            existing._open()
            return existing
        file = File(name, self)
        file._open()
        self._open_files[name] = file
        return file

    def close_file(self, file: Optional[File]) -> None:
        """Drop one reference to an open file, closing it at the last one."""
        if file is None:
            raise MinirelError(Status.BADFILEPTR)
        try:
            file._close()
        except MinirelError:
            pass
        if file.open_count == 0:
            if self._open_files.pop(file.name, None) is None:
                raise MinirelError(Status.BADFILEPTR)