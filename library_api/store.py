import time

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from library_api.errors import Conflict, LibraryError, StoreFailure


class UnitInProgress(RuntimeError):
    """begin() was called on a session that still holds work of its own."""


class AtomicUnit:
    """
    One database transaction spanning the inventory and the ledger.

    Usable directly (begin / commit / abort) or as a context manager, which
    commits on a clean exit and aborts on any exception.

    begin() starts from a clean session: it ends the read-only transaction
    left open by earlier queries, and refuses with UnitInProgress when the
    session has unflushed changes or another unit is already open on it.
    Units do not nest.
    """

    _FLAG = "library_atomic_unit"

    def __init__(self, session):
        self.session = session
        self._active = False

    def begin(self):
        if self.session.info.get(self._FLAG):
            raise UnitInProgress("An atomic unit is already open on this session")
        if self.session.new or self.session.dirty or self.session.deleted:
            raise UnitInProgress("Session has uncommitted changes; commit or roll them back first")

        # end the implicit read transaction so every check inside the unit
        # sees current committed state
        self.session.rollback()
        self.session.begin()
        self.session.info[self._FLAG] = True
        self._active = True
        return self

    def commit(self):
        try:
            self.session.commit()
        finally:
            self._release()

    def abort(self):
        try:
            self.session.rollback()
        finally:
            self._release()

    def _release(self):
        if self._active:
            self.session.info.pop(self._FLAG, None)
        self._active = False

    def __enter__(self):
        return self.begin()

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.commit()
        else:
            self.abort()
        return False


class LibraryStore:
    """
    Owned handle on the database. Built once by create_app and passed to the
    repositories and services that need it.
    """

    def __init__(self, db, max_attempts: int = 3, timeout: float = 5.0, backoff: float = 0.05):
        self.db = db
        self.max_attempts = max(1, int(max_attempts))
        self.timeout = float(timeout)
        self.backoff = float(backoff)

    @property
    def session(self):
        return self.db.session

    def atomic(self) -> AtomicUnit:
        return AtomicUnit(self.session)

    def ping(self) -> bool:
        try:
            self.session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            current_app.logger.warning(f"[store] ping failed: {e}")
            return False
        finally:
            self.session.rollback()

    def run_in_transaction(self, fn):
        """
        Run fn(unit) inside an atomic unit and commit.

        Domain errors raised by fn abort the unit and propagate unchanged.
        Transient store errors (OperationalError) abort and retry with linear
        backoff until max_attempts or the timeout is reached, then surface as
        a retryable StoreFailure. Any other store error aborts the unit and is
        also reported as a retryable StoreFailure, since nothing was persisted.
        Store-level constraint violations become Conflict.
        """
        deadline = time.monotonic() + self.timeout
        attempt = 0
        while True:
            attempt += 1
            unit = self.atomic()
            # UnitInProgress from here leaves the caller's session untouched
            unit.begin()
            try:
                result = fn(unit)
                unit.commit()
                return result
            except LibraryError:
                unit.abort()
                raise
            except IntegrityError as e:
                unit.abort()
                raise Conflict(f"Store rejected the change: {e.orig}") from e
            except OperationalError as e:
                unit.abort()
                delay = self.backoff * attempt
                if attempt >= self.max_attempts or time.monotonic() + delay >= deadline:
                    current_app.logger.error(
                        f"[store] transaction failed after {attempt} attempt(s): {e.orig}"
                    )
                    raise StoreFailure("Store unavailable, try again later") from e
                current_app.logger.warning(
                    f"[store] transient failure (attempt {attempt}/{self.max_attempts}): {e.orig}"
                )
                time.sleep(delay)
            except SQLAlchemyError as e:
                unit.abort()
                current_app.logger.error(f"[store] transaction aborted: {e}")
                raise StoreFailure(f"Store error: {e}") from e
            except Exception:
                unit.abort()
                raise
