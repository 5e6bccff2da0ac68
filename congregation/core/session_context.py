"""
Process-side source of truth for "who is signed in and what can they do".

The remote auth client reports session changes through a callback. The
callback only enqueues the event; one consumer thread re-derives the
user's profile and roles and publishes an immutable SessionSnapshot.
Every event is tagged with a generation number, and a derivation whose
generation has been superseded by a newer event is dropped instead of
published.

The consumer thread only lives while events are pending, and the auth
subscription holds the context weakly. A context nobody references is
collected and its subscription removed, with or without ``stop()``.

Lifecycle::

    context = SessionContext(client)
    context.start()                     # loading=True until the first derivation lands
    snapshot = context.wait_until_ready(timeout=5)
    ...
    context.stop()                      # unsubscribes, no further transitions
"""
import logging
import threading
import weakref
from collections import deque
from typing import Any, Callable, List, Optional

from supabase_auth.errors import AuthError

from congregation.core.errors import AuthenticationError, ServiceError, service_error
from congregation.schemas.auth import AuthUser, SessionSnapshot
from congregation.services.auth_service import fetch_roles
from congregation.services.profile_service import fetch_profile

logger = logging.getLogger(__name__)

INITIAL_SESSION = "INITIAL_SESSION"
SIGNED_OUT = "SIGNED_OUT"
PROFILE_UPDATED = "PROFILE_UPDATED"

Listener = Callable[[SessionSnapshot], None]


def _weak_auth_callback(context: "SessionContext"):
    handler = weakref.WeakMethod(context._on_auth_state_change)

    def callback(event, session):
        bound = handler()
        if bound is not None:
            bound(event, session)

    return callback


def auth_user_from_session(session: Any) -> Optional[AuthUser]:
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))


def derive_snapshot(client, session: Any, generation: int) -> SessionSnapshot:
    """
    Build the Ready snapshot for ``session``.

    A profile read failure leaves profile=None and is only logged. A roles
    read failure leaves the member with no roles rather than failing.
    """
    user = auth_user_from_session(session)
    if user is None:
        return SessionSnapshot(generation=generation, loading=False)

    try:
        profile = fetch_profile(client, user.id)
    except ServiceError as e:
        logger.warning(f"[SESSION] Profile fetch failed for {user.id}: {e.message}")
        profile = None

    try:
        roles = fetch_roles(client, user.id)
    except ServiceError as e:
        logger.error(f"[SESSION] Error fetching user roles for {user.id}: {e.message}")
        roles = frozenset()

    return SessionSnapshot(
        generation=generation,
        loading=False,
        session=session,
        user=user,
        profile=profile,
        roles=roles,
    )


class SessionContext:

    def __init__(self, client):
        self._client = client
        # Pending (generation, event, session); only touched under self._cond
        self._events: deque = deque()
        # Condition over an RLock: listeners may read the snapshot while being notified
        self._cond = threading.Condition()
        self._snapshot = SessionSnapshot()
        self._latest_generation = 0
        self._listeners: List[Listener] = []
        self._unsubscribe: Optional[weakref.finalize] = None
        self._worker: Optional[threading.Thread] = None
        self._started = False
        self._stopped = False

    # -------------------------
    # Read side
    # -------------------------
    @property
    def snapshot(self) -> SessionSnapshot:
        with self._cond:
            return self._snapshot

    @property
    def latest_generation(self) -> int:
        with self._cond:
            return self._latest_generation

    def wait_until_ready(self, timeout: Optional[float] = None) -> SessionSnapshot:
        """Block until the snapshot is no longer loading (or timeout). Returns the current snapshot."""
        with self._cond:
            self._cond.wait_for(lambda: not self._snapshot.loading or self._stopped, timeout=timeout)
            return self._snapshot

    def add_listener(self, callback: Listener) -> Callable[[], None]:
        with self._cond:
            self._listeners.append(callback)

        def unsubscribe():
            with self._cond:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    # -------------------------
    # Lifecycle
    # -------------------------
    def start(self) -> "SessionContext":
        with self._cond:
            if self._started:
                return self
            self._started = True

        subscription = self._client.auth.on_auth_state_change(_weak_auth_callback(self))
        # Runs on stop() or when the context is garbage collected, whichever comes first
        self._unsubscribe = weakref.finalize(self, subscription.unsubscribe)

        try:
            session = self._client.auth.get_session()
        except AuthError as e:
            logger.warning(f"[SESSION] Could not restore persisted session: {e}")
            session = None
        self._enqueue(INITIAL_SESSION, session)
        return self

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        with self._cond:
            if self._stopped:
                return
            self._stopped = True
            self._events.clear()
            worker = self._worker
            self._cond.notify_all()

        if self._unsubscribe is not None:
            self._unsubscribe()

        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout)
        logger.info("[SESSION] Session context stopped")

    # -------------------------
    # Actions
    # -------------------------
    def sign_out(self) -> None:
        """
        Clear the remote session. Local state goes back to signed-out through
        the auth listener; if the client did not report the change, a
        SIGNED_OUT event is enqueued here.
        """
        before = self.latest_generation
        try:
            self._client.auth.sign_out()
        except AuthError as e:
            logger.error(f"[SESSION] Sign out failed: {e}")
            raise service_error(e, AuthenticationError)

        if self.latest_generation == before:
            self._enqueue(SIGNED_OUT, None)

    def refresh(self) -> None:
        """Re-derive profile and roles for the current session."""
        try:
            session = self._client.auth.get_session()
        except AuthError as e:
            logger.warning(f"[SESSION] Could not read session for refresh: {e}")
            session = self.snapshot.session
        self._enqueue(PROFILE_UPDATED, session)

    # -------------------------
    # Internals
    # -------------------------
    def _on_auth_state_change(self, event, session) -> None:
        logger.info(f"[SESSION] Auth event {event}")
        self._enqueue(str(event), session)

    def _enqueue(self, event: str, session: Any) -> None:
        with self._cond:
            if self._stopped:
                return
            self._latest_generation += 1
            generation = self._latest_generation
            # Loading snapshot: new identity, no profile or roles until derived
            self._publish(SessionSnapshot(
                generation=generation,
                loading=True,
                session=session,
                user=auth_user_from_session(session),
            ))
            self._events.append((generation, event, session))
            if self._worker is None:
                self._worker = threading.Thread(target=self._run, name="session-context", daemon=True)
                self._worker.start()

    def _run(self) -> None:
        # Drains the pending events, then exits; _enqueue starts a new worker when needed
        while True:
            with self._cond:
                if self._stopped or not self._events:
                    self._worker = None
                    return
                generation, event, session = self._events.popleft()

            if generation != self.latest_generation:
                logger.debug(f"[SESSION] Skipping superseded {event} (generation {generation})")
                continue

            try:
                snapshot = derive_snapshot(self._client, session, generation)
            except Exception:
                logger.exception(f"[SESSION] Deriving {event} failed; continuing without profile or roles")
                snapshot = SessionSnapshot(
                    generation=generation,
                    loading=False,
                    session=session,
                    user=auth_user_from_session(session),
                )

            with self._cond:
                if self._stopped:
                    return
                if generation != self._latest_generation:
                    logger.info(
                        f"[SESSION] Discarding stale {event} derivation "
                        f"(generation {generation}, latest {self._latest_generation})"
                    )
                    continue
                self._publish(snapshot)
                logger.info(
                    f"[SESSION] Ready: user={snapshot.user.id if snapshot.user else None} "
                    f"roles={sorted(r.value for r in snapshot.roles)}"
                )

    def _publish(self, snapshot: SessionSnapshot) -> None:
        # Caller holds self._cond
        self._snapshot = snapshot
        self._cond.notify_all()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("[SESSION] Snapshot listener failed")
