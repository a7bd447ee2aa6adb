import pytest
from sqlalchemy.exc import InterfaceError, OperationalError

from library_api.errors import Conflict, NotFound, StoreFailure
from library_api.extensions import get_service
from library_api.models.book import Book
from library_api.store import LibraryStore, UnitInProgress
from tests.helpers import make_book, quantity_of


def _locked():
    return OperationalError("UPDATE books ...", {}, Exception("database is locked"))


@pytest.fixture
def store(ctx):
    return get_service("store")


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("library_api.store.time.sleep", lambda seconds: None)


def test_run_in_transaction_commits_result(store):
    book_id = store.run_in_transaction(
        lambda unit: _add_book(unit, "Solaris", 2)
    )

    assert quantity_of(book_id) == 2


def test_domain_error_aborts_unit(store):
    def work(unit):
        _add_book(unit, "Ubik", 1)
        raise NotFound("nope")

    with pytest.raises(NotFound):
        store.run_in_transaction(work)

    assert store.session.query(Book).count() == 0


def test_transient_failure_is_retried(store):
    calls = []

    def work(unit):
        calls.append(1)
        if len(calls) < 3:
            raise _locked()
        return _add_book(unit, "Hyperion", 1)

    book_id = store.run_in_transaction(work)

    assert len(calls) == 3
    assert quantity_of(book_id) == 1


def test_exhausted_retries_surface_retryable_failure_without_partial_state(ctx):
    store = LibraryStore(get_service("store").db, max_attempts=2, timeout=5.0, backoff=0.0)
    calls = []

    def work(unit):
        calls.append(1)
        _add_book(unit, "Neuromancer", 1)
        raise _locked()

    with pytest.raises(StoreFailure) as exc_info:
        store.run_in_transaction(work)

    assert exc_info.value.retryable is True
    assert len(calls) == 2
    assert store.session.query(Book).count() == 0


def test_deadline_stops_retries(ctx):
    store = LibraryStore(get_service("store").db, max_attempts=100, timeout=0.0, backoff=0.01)
    calls = []

    def work(unit):
        calls.append(1)
        raise _locked()

    with pytest.raises(StoreFailure):
        store.run_in_transaction(work)

    assert len(calls) == 1


def test_integrity_error_maps_to_conflict(store):
    book = make_book(quantity=0)

    def force_negative(unit):
        # bypasses the guarded update; the CHECK constraint must refuse it
        unit.session.query(Book).filter(Book.id == book.id).update(
            {Book.book_quantity: -1}, synchronize_session=False
        )

    with pytest.raises(Conflict):
        store.run_in_transaction(force_negative)

    assert quantity_of(book.id) == 0


def test_atomic_unit_context_manager(store):
    with store.atomic() as unit:
        _add_book(unit, "Foundation", 3)

    assert store.session.query(Book).count() == 1

    with pytest.raises(RuntimeError):
        with store.atomic() as unit:
            _add_book(unit, "Second Foundation", 3)
            raise RuntimeError("abort")

    assert store.session.query(Book).count() == 1


def test_ping(store):
    assert store.ping() is True


def _add_book(unit, title, quantity):
    book = Book(title=title, book_quantity=quantity)
    unit.session.add(book)
    unit.session.flush()
    return book.id


def test_store_errors_are_retryable_after_abort(store):
    def work(unit):
        _add_book(unit, "Ubik", 1)
        raise InterfaceError("COMMIT", {}, Exception("connection already closed"))

    with pytest.raises(StoreFailure) as exc_info:
        store.run_in_transaction(work)

    assert exc_info.value.retryable is True
    assert store.session.query(Book).count() == 0


def test_begin_refuses_pending_changes(store):
    store.session.add(Book(title="Unsaved", book_quantity=1))

    with pytest.raises(UnitInProgress):
        store.run_in_transaction(lambda unit: _add_book(unit, "Other", 1))

    # the caller's pending work is still there to commit
    store.session.commit()
    assert [b.title for b in store.session.query(Book)] == ["Unsaved"]


def test_units_do_not_nest(store):
    def outer(unit):
        _add_book(unit, "Outer", 1)
        store.run_in_transaction(lambda inner: _add_book(inner, "Inner", 1))

    with pytest.raises(UnitInProgress):
        store.run_in_transaction(outer)

    assert store.session.query(Book).count() == 0
    # the session is usable again once the outer unit aborted
    store.run_in_transaction(lambda unit: _add_book(unit, "Later", 1))
    assert store.session.query(Book).count() == 1
