"""Session registry shared by every request handler."""

from __future__ import annotations

import logging
import random
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Tuple, TypeVar

from .engine import GameSession
from .errors import SessionNotFound
from .player import DEFAULT_MAX_HEALTH
from .snapshot import GameSnapshot

__all__ = ["ReadWriteLock", "SessionRegistry"]

log = logging.getLogger(__name__)

R = TypeVar("R")


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    Writers are preferred: once a writer is waiting, new readers queue behind
    it so a steady stream of lookups cannot starve a mutation.
    """

    __slots__ = ("_cond", "_readers", "_writer", "_writers_waiting")

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SessionRegistry:
    """Track active game sessions keyed by opaque identifiers.

    Membership is guarded by a :class:`ReadWriteLock`. Lookups and snapshots
    take the read side; creation, removal and every move played against a
    session hold the write side for the whole operation, so a session is only
    ever mutated by one caller at a time.
    """

    __slots__ = ("_sessions", "_lock", "_max_health")

    def __init__(self, *, max_health: int = DEFAULT_MAX_HEALTH) -> None:
        self._sessions: Dict[str, GameSession] = {}
        self._lock = ReadWriteLock()
        self._max_health = max_health

    def create(self, *, seed: Optional[int] = None) -> str:
        """Deal a new game and return its identifier."""

        rng = random.Random(seed) if seed is not None else None
        session = GameSession(max_health=self._max_health, rng=rng)
        self.add(session)
        log.info("Created session %s (seed=%s)", session.id, seed)
        return session.id

    def add(self, session: GameSession) -> str:
        """Register an already dealt ``session`` under its own identifier."""

        with self._lock.write():
            if session.id in self._sessions:
                raise ValueError(f"Session {session.id!r} is already registered")
            self._sessions[session.id] = session
        return session.id

    def get(self, session_id: str) -> GameSession:
        """Return the session mapped to ``session_id``.

        The returned object is not protected by the registry lock; use
        :meth:`update` or the move helpers to mutate it.
        """

        with self._lock.read():
            return self._lookup(session_id)

    def delete(self, session_id: str) -> None:
        with self._lock.write():
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFound(session_id)
        log.info("Deleted session %s", session_id)

    def cleanup(self) -> int:
        """Remove every won or lost session. Returns the number removed."""

        with self._lock.write():
            finished = [key for key, session in self._sessions.items() if session.is_over]
            for key in finished:
                del self._sessions[key]
        if finished:
            log.info("Cleaned up %d finished session(s)", len(finished))
        return len(finished)

    def state(self, session_id: str) -> GameSnapshot:
        with self._lock.read():
            return self._lookup(session_id).snapshot()

    def play_card(self, session_id: str, index: int) -> GameSnapshot:
        return self._apply(session_id, lambda session: session.play_card(index))

    def play_card_without_weapon(self, session_id: str, index: int) -> GameSnapshot:
        return self._apply(
            session_id, lambda session: session.play_card_without_weapon(index)
        )

    def skip_room(self, session_id: str) -> GameSnapshot:
        return self._apply(session_id, lambda session: session.skip_room())

    def update(self, session_id: str, mutator: Callable[[GameSession], R]) -> R:
        """Apply ``mutator`` to a session while holding the write lock.

        ``mutator`` must be synchronous and must not call back into the
        registry.
        """

        with self._lock.write():
            return mutator(self._lookup(session_id))

    def sessions(self) -> Tuple[GameSession, ...]:
        """Return a snapshot of the active session objects."""

        with self._lock.read():
            return tuple(self._sessions.values())

    def count(self) -> int:
        with self._lock.read():
            return len(self._sessions)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, session_id: object) -> bool:
        with self._lock.read():
            return session_id in self._sessions

    def _apply(self, session_id: str, move: Callable[[GameSession], object]) -> GameSnapshot:
        with self._lock.write():
            session = self._lookup(session_id)
            move(session)
            return session.snapshot()

    def _lookup(self, session_id: str) -> GameSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(session_id) from None
