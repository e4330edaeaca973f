import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scoundrel.cards import Card, Deck, Rank, Suit
from scoundrel.engine import GameSession, GameState
from scoundrel.errors import PreviousRoomSkipped, SessionNotFound
from scoundrel.sessions import ReadWriteLock, SessionRegistry


def test_create_and_fetch_session() -> None:
    registry = SessionRegistry(max_health=15)

    game_id = registry.create(seed=3)

    assert game_id in registry
    assert len(registry) == 1
    session = registry.get(game_id)
    assert session.player.max_health == 15
    snapshot = registry.state(game_id)
    assert snapshot.game_id == game_id
    assert snapshot.state == "InProgress"
    assert len(snapshot.room_cards) == 4


def test_seeded_sessions_share_a_layout() -> None:
    registry = SessionRegistry()

    first = registry.state(registry.create(seed=11))
    second = registry.state(registry.create(seed=11))

    assert first.game_id != second.game_id
    assert first.room_cards == second.room_cards


def test_unknown_session_raises_not_found() -> None:
    registry = SessionRegistry()

    with pytest.raises(SessionNotFound) as excinfo:
        registry.state("missing")

    assert isinstance(excinfo.value, KeyError)
    assert excinfo.value.session_id == "missing"
    with pytest.raises(SessionNotFound):
        registry.play_card("missing", 0)
    with pytest.raises(SessionNotFound):
        registry.delete("missing")


def test_moves_return_fresh_snapshots() -> None:
    registry = SessionRegistry()
    game_id = registry.create(seed=5)

    snapshot = registry.skip_room(game_id)
    assert snapshot.previous_room_skipped
    with pytest.raises(PreviousRoomSkipped):
        registry.skip_room(game_id)

    snapshot = registry.play_card_without_weapon(game_id, 0)
    assert snapshot.last_played is not None
    assert len(snapshot.room_cards) == 3


def test_add_rejects_duplicate_ids() -> None:
    registry = SessionRegistry()
    session = GameSession(game_id="fixed")

    assert registry.add(session) == "fixed"
    with pytest.raises(ValueError):
        registry.add(GameSession(game_id="fixed"))


def test_delete_and_cleanup() -> None:
    registry = SessionRegistry()
    keep = registry.create()
    finished = registry.add(
        GameSession(deck=Deck([Card(Suit.HEARTS, Rank.TWO)]))
    )
    gone = registry.create()

    assert registry.get(finished).state is GameState.WON
    registry.delete(gone)
    assert gone not in registry

    assert registry.cleanup() == 1
    assert registry.count() == 1
    assert keep in registry
    assert registry.cleanup() == 0


def test_update_runs_mutator_and_returns_its_result() -> None:
    registry = SessionRegistry()
    game_id = registry.create()

    health = registry.update(game_id, lambda session: session.player.health)

    assert health == 20


def test_concurrent_creation_is_safe() -> None:
    registry = SessionRegistry()

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(lambda seed: registry.create(seed=seed), range(50)))

    assert len(set(ids)) == 50
    assert registry.count() == 50
    assert {session.id for session in registry.sessions()} == set(ids)


def test_writer_excludes_readers() -> None:
    lock = ReadWriteLock()
    writer_inside = threading.Event()
    release_writer = threading.Event()
    reader_done = threading.Event()
    order = []

    def writer() -> None:
        with lock.write():
            writer_inside.set()
            release_writer.wait(timeout=5)
            order.append("writer")

    def reader() -> None:
        with lock.read():
            order.append("reader")
        reader_done.set()

    writer_thread = threading.Thread(target=writer)
    writer_thread.start()
    assert writer_inside.wait(timeout=5)

    reader_thread = threading.Thread(target=reader)
    reader_thread.start()
    assert not reader_done.wait(timeout=0.1)

    release_writer.set()
    writer_thread.join(timeout=5)
    reader_thread.join(timeout=5)
    assert order == ["writer", "reader"]
