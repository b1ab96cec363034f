"""
Tests for the reader/writer lock guarding the ESI caches.
"""

import threading

from evesettings.utils.locks import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    first_in = threading.Event()
    release = threading.Event()

    def reader():
        with lock.read_locked():
            first_in.set()
            release.wait(5)

    t = threading.Thread(target=reader)
    t.start()
    assert first_in.wait(5)

    # A second reader gets in while the first still holds the lock
    acquired = threading.Event()

    def second_reader():
        with lock.read_locked():
            acquired.set()

    t2 = threading.Thread(target=second_reader)
    t2.start()
    assert acquired.wait(5)

    release.set()
    t.join(5)
    t2.join(5)


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    reader_in = threading.Event()
    release_reader = threading.Event()
    writer_in = threading.Event()

    def reader():
        with lock.read_locked():
            reader_in.set()
            release_reader.wait(5)

    def writer():
        with lock.write_locked():
            writer_in.set()

    r = threading.Thread(target=reader)
    r.start()
    assert reader_in.wait(5)

    w = threading.Thread(target=writer)
    w.start()
    assert not writer_in.wait(0.1)

    release_reader.set()
    assert writer_in.wait(5)
    r.join(5)
    w.join(5)


def test_readers_wait_for_writer():
    lock = ReadWriteLock()
    lock.acquire_write()
    reader_in = threading.Event()

    def reader():
        with lock.read_locked():
            reader_in.set()

    t = threading.Thread(target=reader)
    t.start()
    assert not reader_in.wait(0.1)

    lock.release_write()
    assert reader_in.wait(5)
    t.join(5)
