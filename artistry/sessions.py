# sessions.py
"""
Server-side sessions for Flask.

The cookie carries only a signed session id; the session data lives in a
store (the `sessions` table, or process memory for single-instance dev).
Handlers keep using `flask.session` as usual.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone

from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import CallbackDict

logger = logging.getLogger(__name__)


class ServerSession(CallbackDict, SessionMixin):
    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False


class SessionStoreError(Exception):
    """The session store could not be read or written."""


class MemorySessionStore:
    def __init__(self):
        self._data = {}

    def load(self, sid):
        record = self._data.get(sid)
        if record is None:
            return None
        data, expires_at = record
        if expires_at <= datetime.now(timezone.utc):
            del self._data[sid]
            return None
        return dict(data)

    def save(self, sid, data, expires_at):
        self._data[sid] = (dict(data), expires_at)

    def delete(self, sid):
        self._data.pop(sid, None)

    def purge_expired(self):
        now = datetime.now(timezone.utc)
        expired = [sid for sid, (_, expires_at) in self._data.items() if expires_at <= now]
        for sid in expired:
            del self._data[sid]
        return len(expired)


class SqlSessionStore:
    """Sessions table via Flask-SQLAlchemy; uses its own short transactions.

    Database errors are rolled back and re-raised as SessionStoreError.
    """

    def __init__(self, db):
        self.db = db

    def _model(self):
        from .models import SessionRecord
        return SessionRecord

    def _failed(self, exc):
        self.db.session.rollback()
        return SessionStoreError(str(exc))

    def load(self, sid):
        try:
            record = self.db.session.get(self._model(), sid)
        except SQLAlchemyError as exc:
            raise self._failed(exc) from exc
        if record is None:
            return None
        expires_at = record.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= datetime.now(timezone.utc):
            self.delete(sid)
            return None
        return dict(record.data)

    def save(self, sid, data, expires_at):
        SessionRecord = self._model()
        try:
            record = self.db.session.get(SessionRecord, sid)
            if record is None:
                record = SessionRecord(sid=sid)
                self.db.session.add(record)
            record.data = dict(data)
            record.expires_at = expires_at
            self.db.session.commit()
        except SQLAlchemyError as exc:
            raise self._failed(exc) from exc

    def delete(self, sid):
        SessionRecord = self._model()
        try:
            self.db.session.query(SessionRecord).filter_by(sid=sid).delete()
            self.db.session.commit()
        except SQLAlchemyError as exc:
            raise self._failed(exc) from exc

    def purge_expired(self):
        SessionRecord = self._model()
        try:
            count = (
                self.db.session.query(SessionRecord)
                .filter(SessionRecord.expires_at <= datetime.now(timezone.utc))
                .delete()
            )
            self.db.session.commit()
        except SQLAlchemyError as exc:
            raise self._failed(exc) from exc
        return count


class ServerSideSessionInterface(SessionInterface):
    def __init__(self, store):
        self.store = store

    def _signer(self, app):
        return Signer(app.secret_key, salt="artistry-session")

    def _lifetime(self, app):
        return timedelta(hours=app.config.get("SESSION_LIFETIME_HOURS", 24))

    def open_session(self, app, request):
        cookie = request.cookies.get(self.get_cookie_name(app))
        if cookie:
            try:
                sid = self._signer(app).unsign(cookie).decode()
            except BadSignature:
                logger.warning("Rejected session cookie with a bad signature")
            else:
                try:
                    data = self.store.load(sid)
                except SessionStoreError as exc:
                    # Serve the request anonymously; the cookie is left alone
                    logger.error("Session store unavailable on load: %s", exc)
                    data = None
                if data is not None:
                    return ServerSession(data, sid=sid)
        return ServerSession(sid=secrets.token_hex(32), new=True)

    def save_session(self, app, session, response):
        if session is None:
            return
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if not session:
            if session.modified:
                try:
                    self.store.delete(session.sid)
                except SessionStoreError as exc:
                    logger.error("Session store unavailable on delete: %s", exc)
                response.delete_cookie(name, domain=domain, path=path)
            return

        if not session.modified and not self.should_set_cookie(app, session):
            return

        expires_at = datetime.now(timezone.utc) + self._lifetime(app)
        try:
            self.store.save(session.sid, dict(session), expires_at)
        except SessionStoreError as exc:
            # No record was written, so no cookie goes out
            logger.error("Session store unavailable on save: %s", exc)
            return
        response.set_cookie(
            name,
            self._signer(app).sign(session.sid).decode(),
            expires=expires_at,
            httponly=self.get_cookie_httponly(app),
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
            domain=domain,
            path=path,
        )


def regenerate(session):
    """Give the session a fresh id (call on login to avoid fixation)."""
    from flask import current_app

    old_sid = session.sid
    session.sid = secrets.token_hex(32)
    session.modified = True
    if not session.new:
        try:
            current_app.session_interface.store.delete(old_sid)
        except SessionStoreError as exc:
            logger.error("Could not drop replaced session: %s", exc)


def init_sessions(app, db):
    backend = app.config.get("SESSION_BACKEND", "sqlalchemy")
    if backend == "memory":
        store = MemorySessionStore()
    elif backend == "sqlalchemy":
        store = SqlSessionStore(db)
    else:
        raise ValueError(f"Unknown SESSION_BACKEND: {backend!r}")
    app.session_interface = ServerSideSessionInterface(store)
    return store
