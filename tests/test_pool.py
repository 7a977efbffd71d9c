"""Tests for the buffer and compressor pools."""

from __future__ import annotations

import gzip
import io
import threading

import pytest

from bindata_core.pool import GzipCompressor, ObjectPool, buffer_pool, gzip_pool


def test_returned_instance_is_reused():
    pool = ObjectPool(io.BytesIO)
    buf = pool.get()
    pool.put(buf)
    assert pool.get() is buf


def test_reset_runs_on_return():
    pool = ObjectPool(io.BytesIO, reset=lambda b: (b.seek(0), b.truncate()))
    with pool.acquire() as buf:
        buf.write(b"leftover")
    with pool.acquire() as again:
        assert again is buf
        assert again.getvalue() == b""


def test_acquire_returns_on_error():
    pool = ObjectPool(object)
    with pytest.raises(RuntimeError):
        with pool.acquire():
            raise RuntimeError("boom")
    assert len(pool) == 1


def test_idle_list_is_bounded():
    pool = ObjectPool(object, max_idle=2)
    items = [pool.get() for _ in range(5)]
    for item in items:
        pool.put(item)
    assert len(pool) == 2


def test_concurrent_holders_get_distinct_instances():
    pool = ObjectPool(io.BytesIO)
    barrier = threading.Barrier(8)
    held: list[int] = []
    lock = threading.Lock()

    def worker():
        with pool.acquire() as buf:
            with lock:
                held.append(id(buf))
            barrier.wait()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(held)) == 8


def test_shared_buffer_pool_clears_on_return():
    with buffer_pool.acquire() as buf:
        buf.write(b"scratch")
    with buffer_pool.acquire() as buf:
        assert buf.getvalue() == b""


# ── GzipCompressor ───────────────────────────────────────────────────


def test_compressor_produces_gzip():
    out = io.BytesIO()
    gz = GzipCompressor()
    gz.reset(out)
    gz.write(b"hello " * 100)
    gz.close()
    assert gzip.decompress(out.getvalue()) == b"hello " * 100


def test_compressor_reuse_is_deterministic():
    gz = GzipCompressor()
    outputs = []
    for _ in range(2):
        out = io.BytesIO()
        gz.reset(out, level=9)
        gz.write(b"payload")
        gz.close()
        outputs.append(out.getvalue())
    assert outputs[0] == outputs[1]


def test_compressor_requires_reset():
    with pytest.raises(ValueError):
        GzipCompressor().write(b"x")


def test_compressor_pool_hands_out_compressors():
    with gzip_pool.acquire() as gz:
        assert isinstance(gz, GzipCompressor)
