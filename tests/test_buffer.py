import pytest

from minirel.buffer import BufHashTable, BufMgr, BufStats
from minirel.dbfile import DB
from minirel.errors import MinirelError, Status

PAGE = 128


@pytest.fixture
def db():
    return DB(page_size=PAGE)


@pytest.fixture
def opened(db, tmp_path):
    name = str(tmp_path / "data.db")
    db.create_file(name)
    return db.open_file(name)


def make_mgr(db, frames):
    mgr = BufMgr(frames)
    db.buffer_manager = mgr
    return mgr


def test_hash_table_insert_lookup_remove():
    table = BufHashTable(7)
    key = object()
    table.insert(key, 3, 5)
    assert table.lookup(key, 3) == 5
    table.remove(key, 3)
    with pytest.raises(MinirelError) as info:
        table.lookup(key, 3)
    assert info.value.status == Status.HASHNOTFOUND


def test_hash_table_duplicate_and_missing_remove():
    table = BufHashTable(3)
    key = object()
    table.insert(key, 1, 0)
    with pytest.raises(MinirelError) as info:
        table.insert(key, 1, 2)
    assert info.value.status == Status.HASHTBLERROR
    with pytest.raises(MinirelError) as info:
        table.remove(key, 9)
    assert info.value.status == Status.HASHTBLERROR


def test_hash_table_distinguishes_files():
    table = BufHashTable(1)
    a, b = object(), object()
    table.insert(a, 1, 10)
    table.insert(b, 1, 20)
    assert table.lookup(a, 1) == 10
    assert table.lookup(b, 1) == 20


def test_alloc_write_flush_round_trip(db, opened):
    mgr = make_mgr(db, 4)
    page_no, page = mgr.alloc_page(opened)
    page[:5] = b"hello"
    mgr.unpin_page(opened, page_no, True)
    mgr.flush_file(opened)
    assert opened.read_page(page_no)[:5] == b"hello"


def test_read_page_hit_does_not_read_disk(db, opened):
    page_no = opened.allocate_page()
    mgr = make_mgr(db, 3)
    first = mgr.read_page(opened, page_no)
    assert mgr.stats.diskreads == 1
    second = mgr.read_page(opened, page_no)
    assert second is first
    assert mgr.stats.diskreads == 1


def test_unpin_more_than_pinned_raises(db, opened):
    page_no = opened.allocate_page()
    mgr = make_mgr(db, 3)
    mgr.read_page(opened, page_no)
    mgr.read_page(opened, page_no)
    mgr.unpin_page(opened, page_no, False)
    mgr.unpin_page(opened, page_no, False)
    with pytest.raises(MinirelError) as info:
        mgr.unpin_page(opened, page_no, False)
    assert info.value.status == Status.PAGENOTPINNED


def test_unpin_unknown_page_raises(db, opened):
    mgr = make_mgr(db, 2)
    with pytest.raises(MinirelError) as info:
        mgr.unpin_page(opened, 1, False)
    assert info.value.status == Status.HASHNOTFOUND


def test_pool_full_when_all_pinned(db, opened):
    mgr = make_mgr(db, 2)
    mgr.alloc_page(opened)
    mgr.alloc_page(opened)
    with pytest.raises(MinirelError) as info:
        mgr.alloc_page(opened)
    assert info.value.status == Status.BUFFEREXCEEDED


def test_eviction_writes_dirty_page(db, opened):
    mgr = make_mgr(db, 1)
    first_no, page = mgr.alloc_page(opened)
    page[:3] = b"abc"
    mgr.unpin_page(opened, first_no, True)
    second_no, _ = mgr.alloc_page(opened)
    assert second_no != first_no
    assert mgr.stats.diskwrites == 1
    assert opened.read_page(first_no)[:3] == b"abc"


def test_flush_file_with_pinned_page_raises(db, opened):
    mgr = make_mgr(db, 2)
    mgr.alloc_page(opened)
    with pytest.raises(MinirelError) as info:
        mgr.flush_file(opened)
    assert info.value.status == Status.PAGEPINNED


def test_flush_file_empties_pool_for_file(db, opened):
    mgr = make_mgr(db, 2)
    page_no, _ = mgr.alloc_page(opened)
    mgr.unpin_page(opened, page_no, False)
    mgr.flush_file(opened)
    with pytest.raises(MinirelError) as info:
        mgr.unpin_page(opened, page_no, False)
    assert info.value.status == Status.HASHNOTFOUND


def test_dispose_page_returns_page_to_free_list(db, opened):
    mgr = make_mgr(db, 4)
    first_no, _ = mgr.alloc_page(opened)
    second_no, _ = mgr.alloc_page(opened)
    mgr.unpin_page(opened, first_no, False)
    mgr.dispose_page(opened, second_no)
    again, _ = mgr.alloc_page(opened)
    assert again == second_no


def test_dispose_first_page_rejected(db, opened):
    mgr = make_mgr(db, 4)
    first_no, _ = mgr.alloc_page(opened)
    with pytest.raises(MinirelError) as info:
        mgr.dispose_page(opened, first_no)
    assert info.value.status == Status.BADPAGENO


def test_flush_all_writes_dirty_pages(db, opened):
    mgr = make_mgr(db, 2)
    page_no, page = mgr.alloc_page(opened)
    page[:4] = b"data"
    mgr.unpin_page(opened, page_no, True)
    mgr.flush_all()
    assert opened.read_page(page_no)[:4] == b"data"


def test_context_manager_flushes(db, opened):
    with make_mgr(db, 2) as mgr:
        page_no, page = mgr.alloc_page(opened)
        page[:2] = b"xy"
        mgr.unpin_page(opened, page_no, True)
    assert opened.read_page(page_no)[:2] == b"xy"


def test_clear_stats(db, opened):
    page_no = opened.allocate_page()
    mgr = make_mgr(db, 2)
    mgr.read_page(opened, page_no)
    assert mgr.stats.diskreads == 1
    mgr.clear_stats()
    assert mgr.stats == BufStats()


def test_buf_stats_clear():
    stats = BufStats(accesses=4, diskreads=2, diskwrites=1)
    stats.clear()
    assert (stats.accesses, stats.diskreads, stats.diskwrites) == (0, 0, 0)


def test_print_self_shows_frames(db, opened, capsys):
    mgr = make_mgr(db, 2)
    _, page = mgr.alloc_page(opened)
    page[:4] = b"text"
    mgr.print_self()
    out = capsys.readouterr().out
    assert "Print buffer..." in out
    assert "text\tpinCnt: 1\tvalid" in out
    assert "pinCnt: 0" in out


def test_zero_frames_rejected():
    with pytest.raises(ValueError):
        BufMgr(0)