"""
Test the GameManager functionality: matchmaking, game lookup, moves and
teardown on disconnect.
"""

import asyncio

import pytest

from steamfront.enums import Color, GameStatus, MatchOutcome
from steamfront.game.coordinate import Coordinate
from steamfront.player import Player
from steamfront.services.game_manager import GameManager


@pytest.fixture
def gm(catalog) -> GameManager:
    return GameManager(catalog)


def alice(conn: str = "conn-alice") -> Player:
    return Player(conn, "alice_123", "Alice")


def bob(conn: str = "conn-bob") -> Player:
    return Player(conn, "bob_456", "Bob")


async def _matched(gm: GameManager):
    await gm.try_match(alice())
    result = await gm.try_match(bob())
    return result.game


# ============================================================================
# MATCHMAKING
# ============================================================================

@pytest.mark.asyncio
async def test_first_player_waits(gm):
    result = await gm.try_match(alice())

    assert result.outcome == MatchOutcome.WAITING
    assert not result.matched
    assert gm.waiting_player.user_id == "alice_123"
    assert gm.games == {}


@pytest.mark.asyncio
async def test_second_player_is_paired_with_waiting_player(gm):
    await gm.try_match(alice())
    result = await gm.try_match(bob())

    assert result.matched
    game = result.game
    assert gm.waiting_player is None
    assert gm.get_game(game.game_id) is game
    # The player who waited plays white
    assert game.players[Color.WHITE].user_id == "alice_123"
    assert game.players[Color.BLACK].user_id == "bob_456"
    assert game.turn == Color.WHITE


@pytest.mark.asyncio
async def test_same_identity_cannot_match_itself(gm):
    first_tab = alice("tab-1")
    await gm.try_match(first_tab)

    result = await gm.try_match(alice("tab-2"))

    assert result.outcome == MatchOutcome.SELF_MATCH
    assert result.game is None
    assert gm.waiting_player is first_tab
    assert gm.games == {}

    # Someone else can still take the game
    result = await gm.try_match(bob())
    assert result.matched
    assert result.game.players[Color.WHITE] is first_tab


@pytest.mark.asyncio
async def test_remove_from_queue(gm):
    await gm.try_match(alice())

    assert not await gm.remove_from_queue("someone-else")
    assert gm.waiting_player is not None

    assert await gm.remove_from_queue("conn-alice")
    assert gm.waiting_player is None


@pytest.mark.asyncio
async def test_simultaneous_arrivals_create_one_game(gm):
    players = [Player(f"conn-{i}", f"user_{i}") for i in range(3)]

    results = await asyncio.gather(*(gm.try_match(p) for p in players))

    outcomes = sorted(r.outcome.value for r in results)
    assert outcomes == ["matched", "waiting", "waiting"]
    assert len(gm.games) == 1
    assert gm.waiting_player is players[2]


@pytest.mark.asyncio
async def test_game_ids_are_unique(gm):
    ids = set()
    for i in range(5):
        await gm.try_match(Player(f"w{i}", f"white_{i}"))
        result = await gm.try_match(Player(f"b{i}", f"black_{i}"))
        ids.add(result.game.game_id)

    assert len(ids) == 5
    assert len(gm.get_all_active_games()) == 5


# ============================================================================
# GAME RETRIEVAL
# ============================================================================

@pytest.mark.asyncio
async def test_game_retrieval(gm):
    game = await _matched(gm)

    assert gm.get_player_game("conn-alice") is game
    assert gm.get_player_game("conn-bob") is game
    assert gm.get_player_game("conn-nobody") is None
    assert gm.get_game("game_missing") is None


@pytest.mark.asyncio
async def test_remove_game(gm):
    game = await _matched(gm)

    assert await gm.remove_game(game.game_id) is game
    assert gm.get_game(game.game_id) is None
    assert gm.get_player_game("conn-alice") is None
    assert await gm.remove_game(game.game_id) is None


@pytest.mark.asyncio
async def test_stats(gm):
    assert gm.get_stats() == {"total_games": 0, "active_games": 0, "finished_games": 0, "waiting": 0}

    await _matched(gm)
    await gm.try_match(Player("conn-carol", "carol_789"))

    assert gm.get_stats() == {"total_games": 1, "active_games": 1, "finished_games": 0, "waiting": 1}
    assert repr(gm) == "<GameManager games=1 waiting=1>"


# ============================================================================
# MOVES
# ============================================================================

@pytest.mark.asyncio
async def test_make_move_applies_and_notifies(gm):
    game = await _matched(gm)
    applied = []

    async def on_applied(g):
        applied.append(g.turn)

    success, message, returned = await gm.make_move(
        "conn-alice", Coordinate(6, 4), Coordinate(5, 4), on_applied=on_applied
    )

    assert success, message
    assert returned is game
    assert applied == [Color.BLACK]


@pytest.mark.asyncio
async def test_rejected_move_does_not_notify(gm):
    await _matched(gm)
    applied = []

    async def on_applied(g):
        applied.append(g)

    success, message, _ = await gm.make_move(
        "conn-bob", Coordinate(1, 4), Coordinate(2, 4), on_applied=on_applied
    )

    assert not success
    assert message == "Not your turn"
    assert applied == []


@pytest.mark.asyncio
async def test_announce_start_runs_for_live_game(gm):
    game = await _matched(gm)
    started = []

    async def on_started(g):
        started.append(g)

    assert await gm.announce_start(game, on_started)
    assert started == [game]


@pytest.mark.asyncio
async def test_no_first_snapshot_after_waiter_left(gm):
    game = await _matched(gm)
    started = []

    async def on_started(g):
        started.append(g)

    # The waiting player drops between pairing and the first broadcast
    result = await gm.handle_disconnect("conn-alice")
    assert result.opponent.connection_id == "conn-bob"

    assert not await gm.announce_start(game, on_started)
    assert started == []


@pytest.mark.asyncio
async def test_move_without_game(gm):
    success, message, game = await gm.make_move("conn-alice", Coordinate(6, 4), Coordinate(5, 4))
    assert (success, message, game) == (False, "Not in a game", None)


@pytest.mark.asyncio
async def test_finished_game_stays_until_disconnect(duel_catalog):
    gm = GameManager(duel_catalog)
    game = await _matched(gm)

    success, _, _ = await gm.make_move("conn-alice", Coordinate(4, 4), Coordinate(3, 4))

    assert success
    assert game.status == GameStatus.WHITE_WINS
    assert gm.get_stats()["finished_games"] == 1
    assert gm.get_player_game("conn-bob") is game


# ============================================================================
# DISCONNECTS
# ============================================================================

@pytest.mark.asyncio
async def test_disconnect_while_waiting_clears_slot(gm):
    await gm.try_match(alice())

    result = await gm.handle_disconnect("conn-alice")

    assert result.was_waiting
    assert result.game is None and result.opponent is None
    assert gm.waiting_player is None


@pytest.mark.asyncio
async def test_disconnect_mid_game_removes_game_and_names_survivor(gm):
    game = await _matched(gm)

    result = await gm.handle_disconnect("conn-bob")

    assert not result.was_waiting
    assert result.game is game
    assert result.opponent.connection_id == "conn-alice"
    assert gm.get_game(game.game_id) is None
    assert gm.get_player_game("conn-alice") is None

    # The survivor's later moves find no game
    success, message, _ = await gm.make_move("conn-alice", Coordinate(6, 4), Coordinate(5, 4))
    assert not success
    assert message == "Not in a game"


@pytest.mark.asyncio
async def test_second_disconnect_is_a_no_op(gm):
    await _matched(gm)
    await gm.handle_disconnect("conn-bob")

    result = await gm.handle_disconnect("conn-alice")

    assert result.game is None and result.opponent is None


@pytest.mark.asyncio
async def test_disconnect_waits_for_move_in_progress(gm):
    game = await _matched(gm)
    events = []

    async def slow_broadcast(g):
        events.append("broadcast started")
        await asyncio.sleep(0.05)
        events.append("broadcast finished")

    async def leave():
        await asyncio.sleep(0.01)
        result = await gm.handle_disconnect("conn-bob")
        events.append("torn down")
        return result

    (success, _, _), result = await asyncio.gather(
        gm.make_move("conn-alice", Coordinate(6, 4), Coordinate(5, 4), on_applied=slow_broadcast),
        leave(),
    )

    assert success
    assert result.game is game
    assert events == ["broadcast started", "broadcast finished", "torn down"]
