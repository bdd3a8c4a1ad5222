# minirel

`minirel` is the storage layer of a small relational database engine,
meant for teaching and experimentation. It has no dependencies outside the
standard library.

## What is in it

- **`minirel.errors`**: every failure raises `MinirelError`. Its `status`
  attribute is a `Status` member (for example `Status.FILEEXISTS` or
  `Status.BUFFEREXCEEDED`), and `describe(status)` returns the message for
  a status code, or `"undefined error status: N"` for an unknown one.
- **`minirel.dbfile`**: `DB(page_size=1024)` creates, destroys, opens and
  closes files made of fixed-size pages. Page 0 of each file is a header
  holding the page count, the first data page and a free list.
  `File.allocate_page()` reuses a disposed page if there is one and
  otherwise extends the file; `File.dispose_page(n)` puts a page on the
  free list (the first data page cannot be disposed); `File.read_page(n)`,
  `File.write_page(n, data)` and `File.first_page()` read and write pages.
  Opening a file that is already open returns the same `File` object, and
  `DB.close_file` closes it only when the last reference is dropped. If
  `DB.buffer_manager` is set to a `BufMgr`, closing a file flushes its
  pages from that pool first.
- **`minirel.buffer`**: `BufMgr(num_bufs)` caches pages in a fixed number
  of frames and picks frames to reuse with the clock algorithm.
  `read_page` and `alloc_page` pin a page and return its `bytearray`
  buffer; `unpin_page(file, page_no, dirty)` releases a pin;
  `flush_file` writes back a file's dirty pages and drops them from the
  pool (it fails with `PAGEPINNED` while any are pinned); `dispose_page`
  drops a page and frees it in its file; `flush_all` writes back every
  dirty page. A `BufMgr` used in a `with` block calls `flush_all` on exit.
  `stats` is a `BufStats` with `accesses`, `diskreads` and `diskwrites`,
  reset by `clear_stats()`. `BufHashTable` is the (file, page) to frame
  map the pool uses.
- **`minirel.schema`**: `Datatype` (`STRING`, `INTEGER`, `FLOAT`),
  `Operator` (`LT`, `LTE`, `EQ`, `GTE`, `GT`, `NE`), and the catalog
  records `RelDesc` and `AttrDesc`, which convert to and from their fixed
  little-endian byte layout with `to_bytes()` and `from_bytes()`. Names of
  32 bytes or more raise `MinirelError(Status.NAMETOOLONG)`. `AttrInfo`
  describes an attribute named in a query.
- **`minirel.joinhash`**: `JoinHashTable(size, attr)` maps the join
  attribute of outer tuples to their record ids; `insert(rid, tuple_data)`
  adds a tuple and `lookup(value)` returns the matching record ids, given
  either raw attribute bytes or a plain `int`, `float` or `str`.
  `compare_join_values(outer, inner, attr1, attr2)` compares the join
  attributes of two records and returns a number whose sign gives their
  order.
- **`minirel.datagen`**: sample relations for exercising the engine:
  `soap_records()`, `star_records()` and `write_soaps_stars(directory)`;
  `generate_rels(...)`, `write_rel_files(directory, seed)` and
  `read_rels(path)` for the `rel500` and `rel1000` relations;
  `shuffled_unique(count, rng)` and `write_unique_tuples(path, count, seed)`
  for files of shuffled unique 4-byte integers.
- **`minirel.dbdestroy`**: `destroy_database(path, answer)` removes a
  database directory when the answer starts with `y` or `Y`.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Using the storage layer

```python
from minirel.dbfile import DB
from minirel.buffer import BufMgr
from minirel.errors import MinirelError, Status

db = DB(1024)
db.create_file("people")
file = db.open_file("people")

pool = BufMgr(100)
page_no, page = pool.alloc_page(file)
page[:5] = b"hello"
pool.unpin_page(file, page_no, True)
pool.flush_file(file)
db.close_file(file)

try:
    db.create_file("people")
except MinirelError as err:
    assert err.status is Status.FILEEXISTS
```

## Commands

`minirel-datagen` writes or inspects the sample data files:

```
minirel-datagen soaps [DIRECTORY]            # soaps.data and stars.data
minirel-datagen rels [DIRECTORY] [--seed N]  # rel500.data and rel1000.data
minirel-datagen unique COUNT OUTPUT [--seed N]
minirel-datagen dump FILE [FILE ...]         # print rows of rel data files
```

`minirel-dbdestroy` removes a database directory after asking for
confirmation on standard input; only an answer starting with `y` or `Y`
deletes it:

```
minirel-dbdestroy mydb
```

## What the package does not do

The package stops at pages, the buffer pool and record layouts. It has no
slotted record pages or heap files, so it does not store records, keep the
relation and attribute catalogs on disk, or scan relations. There are no
query operators (select, insert, delete, or a join that runs over stored
relations), no command that creates a new database, and no interactive
query front end.