from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flask.sessions import SecureCookieSessionInterface

REMEMBER_KEY = "remember"
EXPIRES_KEY = "expires_at"


class RememberMeSessionInterface(SecureCookieSessionInterface):
    """Signed cookie session whose lifetime depends on "remember me".

    Remembered sessions live for ``PERMANENT_SESSION_LIFETIME``; the others
    for ``SESSION_DEFAULT_HOURS``. The expiry is also stored inside the
    session; a session past it opens empty.
    """

    def open_session(self, app, request):
        session = super().open_session(app, request)
        if session is None:
            return None
        expires_at = session.get(EXPIRES_KEY)
        if expires_at is not None and float(expires_at) <= datetime.now(timezone.utc).timestamp():
            app.logger.info("Expired session dropped")
            return self.session_class()
        return session

    def get_expiration_time(self, app, session):
        if not session.permanent:
            return None
        if session.get(REMEMBER_KEY):
            lifetime = app.permanent_session_lifetime
        else:
            lifetime = timedelta(hours=int(app.config.get("SESSION_DEFAULT_HOURS", 2)))
        return datetime.now(timezone.utc) + lifetime

    def start(self, app, session, *, remember: bool) -> None:
        """Reset ``session`` for a fresh login and stamp its expiry."""
        session.clear()
        session.permanent = True
        session[REMEMBER_KEY] = remember
        session[EXPIRES_KEY] = self.get_expiration_time(app, session).timestamp()
