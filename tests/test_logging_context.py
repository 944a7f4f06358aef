"""Tests for logging context propagation."""

import contextvars
import threading

from jobhunt.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    """Test that context starts empty."""
    assert get_log_context() == {}


def test_push_single_field():
    """Test pushing a single field to context."""
    token = push_log_context(search_id="abc123")
    assert get_log_context() == {"search_id": "abc123"}
    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    """Test nested context pushes and pops."""
    token1 = push_log_context(search_id="abc123")
    token2 = push_log_context(source="greenhouse")
    assert get_log_context() == {"search_id": "abc123", "source": "greenhouse"}

    pop_log_context(token2)
    assert get_log_context() == {"search_id": "abc123"}

    pop_log_context(token1)
    assert get_log_context() == {}


def test_context_override():
    """Test that pushing the same key overwrites previous value."""
    token1 = push_log_context(source="greenhouse")
    token2 = push_log_context(source="lever")
    assert get_log_context() == {"source": "lever"}

    pop_log_context(token2)
    assert get_log_context() == {"source": "greenhouse"}

    pop_log_context(token1)


def test_get_returns_copy():
    """Test mutating the returned dict does not change the context."""
    with log_context(search_id="abc123"):
        get_log_context()["search_id"] = "changed"

        assert get_log_context() == {"search_id": "abc123"}


def test_context_manager_nested():
    """Test nested context managers."""
    with log_context(search_id="abc123"):
        with log_context(source="lever"):
            assert get_log_context() == {"search_id": "abc123", "source": "lever"}

        assert get_log_context() == {"search_id": "abc123"}

    assert get_log_context() == {}


def test_context_manager_with_exception():
    """Test context is restored even when an exception occurs."""
    try:
        with log_context(search_id="abc123"):
            raise ValueError("boom")
    except ValueError:
        pass

    assert get_log_context() == {}


def test_clear_context():
    push_log_context(search_id="abc123", source="jobspy")

    clear_log_context()

    assert get_log_context() == {}


def test_plain_thread_does_not_inherit_context():
    """Test a thread started without copy_context sees an empty context."""
    seen = {}

    with log_context(search_id="abc123"):
        thread = threading.Thread(target=lambda: seen.update(get_log_context()))
        thread.start()
        thread.join()

    assert seen == {}


def test_copied_context_reaches_thread():
    """Test copy_context().run carries fields into a worker thread."""
    seen = {}

    def worker():
        with log_context(source="greenhouse"):
            seen.update(get_log_context())

    with log_context(search_id="abc123"):
        ctx = contextvars.copy_context()
        thread = threading.Thread(target=ctx.run, args=(worker,))
        thread.start()
        thread.join()

        assert get_log_context() == {"search_id": "abc123"}

    assert seen == {"search_id": "abc123", "source": "greenhouse"}
