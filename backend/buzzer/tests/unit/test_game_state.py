"""Tests for the GameState buzz queue and scoring engine."""

import pytest

from buzzer.logic.game_state import GameState
from buzzer.logic.types import Buzz, PlayerTeamPair


def _scores(game: GameState) -> dict[int, int]:
    return {pair.player_id: entry.split.points for pair, entry in game.get_last_scoring_splits().items()}


def _snapshot(game: GameState) -> tuple:
    return game.queue, game.ineligible_teams, game.get_last_scoring_splits()


class TestReader:
    def test_reader_not_set_on_creation(self):
        assert GameState().reader_id is None

    def test_reader_persists(self):
        game = GameState()
        game.reader_id = 123
        assert game.reader_id == 123

    def test_cannot_add_reader_to_queue(self):
        game = GameState()
        game.reader_id = 123
        assert game.add_player(123, "Reader") is False
        assert game.queue == ()

    def test_setting_queued_player_as_reader_removes_their_buzz(self):
        game = GameState()
        game.add_player(1, "P1")
        game.add_player(2, "P2")

        game.reader_id = 1

        assert [buzz.player_id for buzz in game.queue] == [2]
        assert game.try_get_next_player() == 2


class TestAddPlayer:
    def test_next_player_none_when_queue_empty(self):
        assert GameState().try_get_next_player() is None

    def test_cannot_add_same_player_twice(self):
        game = GameState()
        assert game.add_player(1234, "Player") is True
        assert game.add_player(1234, "Player") is False

    def test_duplicate_add_leaves_queue_unchanged(self):
        game = GameState()
        game.add_player(1, "P1", 10)
        before = game.queue
        game.add_player(1, "P1 again", 20)
        assert game.queue == before

    def test_first_added_player_is_next(self):
        game = GameState()
        game.add_player(1, "Player1")
        game.add_player(2, "Player2")
        assert game.try_get_next_player() == 1

    @pytest.mark.parametrize("ids", [[1, 2, 3, 4], [9, 3, 7], [42]])
    def test_players_come_out_in_add_order(self, ids):
        game = GameState()
        for player_id in ids:
            assert game.add_player(player_id, f"Player {player_id}")

        for player_id in ids:
            assert game.try_get_next_player() == player_id
            game.score_player(0)

        assert game.try_get_next_player() is None

    def test_try_get_next_player_does_not_mutate(self):
        game = GameState()
        game.add_player(1, "P1")
        assert game.try_get_next_player() == 1
        assert game.try_get_next_player() == 1
        assert len(game.queue) == 1

    def test_queue_records_buzz_details(self):
        game = GameState()
        game.add_player(5, "Five", 100)
        assert game.queue == (Buzz(player_id=5, display_name="Five", team_id=100),)


class TestWithdrawPlayer:
    def test_withdraw_player_at_top_of_queue(self):
        game = GameState()
        game.add_player(1234, "Player")
        assert game.try_get_next_player() == 1234
        assert game.withdraw_player(1234) is True
        assert game.try_get_next_player() is None

    def test_withdraw_player_in_middle_of_queue(self):
        game = GameState()
        game.add_player(1, "Player1")
        game.add_player(22, "Player2")
        game.add_player(333, "Player3")

        assert game.withdraw_player(22) is True
        assert game.withdraw_player(1) is True
        assert game.try_get_next_player() == 333

    def test_withdraw_preserves_order_of_remaining(self):
        game = GameState()
        for player_id in (1, 2, 3, 4):
            game.add_player(player_id, f"P{player_id}")
        game.withdraw_player(2)
        assert [buzz.player_id for buzz in game.queue] == [1, 3, 4]

    def test_cannot_withdraw_player_not_in_queue(self):
        game = GameState()
        game.add_player(1234, "Player")
        assert game.withdraw_player(1235) is False

    def test_cannot_withdraw_twice_in_a_row(self):
        game = GameState()
        game.add_player(1234, "Player")
        assert game.withdraw_player(1234) is True
        assert game.withdraw_player(1234) is False

    def test_can_rebuzz_after_withdrawing(self):
        game = GameState()
        assert game.add_player(1234, "Player")
        assert game.withdraw_player(1234)
        assert game.add_player(1234, "Player")
        assert game.withdraw_player(1234)

    def test_cannot_withdraw_after_being_scored(self):
        game = GameState()
        game.add_player(1, "P1")
        game.add_player(2, "P2")
        game.score_player(-5)
        assert game.withdraw_player(1) is False


class TestScorePlayer:
    def test_cannot_add_player_after_neg(self):
        game = GameState()
        game.add_player(1, "Player")
        game.score_player(-5)
        assert game.try_get_next_player() is None
        assert game.add_player(1, "Player") is False

    def test_cannot_add_player_after_zero_point_buzz(self):
        game = GameState()
        game.add_player(1, "Player")
        game.score_player(0)
        assert game.try_get_next_player() is None
        assert game.add_player(1, "Player") is False

    def test_can_add_player_after_correct_buzz(self):
        game = GameState()
        game.add_player(1, "Player")
        game.score_player(10)
        assert game.try_get_next_player() is None
        assert game.add_player(1, "Player") is True

    def test_correct_buzz_clears_everything_in_the_queue(self):
        game = GameState()
        for player_id in (1, 2, 3):
            game.add_player(player_id, f"P{player_id}", team_id=player_id * 10)

        game.score_player(15)

        assert game.try_get_next_player() is None
        assert game.queue == ()
        assert game.ineligible_teams == frozenset()

    def test_neg_scored(self):
        game = GameState()
        game.add_player(123, "Player")
        game.score_player(-5)
        assert _scores(game) == {123: -5}

    def test_correct_buzz_scored(self):
        game = GameState()
        game.add_player(123, "Player")
        game.score_player(10)
        assert _scores(game) == {123: 10}

    def test_score_accumulates_across_questions(self):
        game = GameState()
        for points in (10, -5, 15):
            assert game.add_player(123, "Player")
            game.score_player(points)
            if points <= 0:
                game.next_question()

        splits = game.get_last_scoring_splits()
        assert len(splits) == 1
        assert splits[PlayerTeamPair(player_id=123)].split.points == 20

    def test_different_players_scored(self):
        game = GameState()
        game.add_player(1, "Player1")
        game.add_player(22, "Player2")
        game.score_player(-5)
        game.score_player(10)
        assert _scores(game) == {1: -5, 22: 10}

    def test_score_with_empty_queue_is_noop(self):
        game = GameState()
        game.score_player(10)
        assert game.get_last_scoring_splits() == {}
        assert game.has_history is False
        assert game.undo() is None

    def test_score_with_only_ineligible_players_is_noop(self):
        game = GameState()
        game.add_player(1, "P1", 7)
        game.add_player(2, "P2", 7)
        game.score_player(0)
        before = _snapshot(game)

        game.score_player(10)

        assert _snapshot(game) == before
        assert [buzz.player_id for buzz in game.queue] == [2]

    def test_any_positive_score_leaves_nobody_eligible(self):
        game = GameState()
        game.add_player(1, "P1", 1)
        game.add_player(2, "P2", 1)
        game.add_player(3, "P3", 2)
        game.score_player(0)
        game.score_player(1)
        assert game.try_get_next_player() is None


class TestTeams:
    def test_same_team_skipped_in_queue(self):
        game = GameState()
        for player_id in (1, 3, 2, 5, 4):
            assert game.add_player(player_id, f"Player {player_id}", 100 + player_id % 2)

        assert game.try_get_next_player() == 1
        game.score_player(0)
        assert game.try_get_next_player() == 2
        game.score_player(0)
        assert game.try_get_next_player() is None

    def test_same_team_skipped_on_wrong_buzz(self):
        game = GameState()
        game.add_player(1, "A", 11)
        game.add_player(3, "C", 12)
        game.add_player(2, "B", 11)

        game.score_player(0)
        assert game.try_get_next_player() == 3
        game.score_player(0)

        assert game.try_get_next_player() is None
        # B is still physically queued
        assert [buzz.player_id for buzz in game.queue] == [2]

    def test_teamless_player_is_excluded_by_their_own_id(self):
        game = GameState()
        game.add_player(1, "Solo")
        game.add_player(2, "Teamed", 1)
        game.score_player(-5)
        assert game.ineligible_teams == frozenset({1})
        # team 1 and player 1 share a key, so the teamed player is skipped too
        assert game.try_get_next_player() is None

    def test_team_included_in_score(self):
        game = GameState()
        game.add_player(1, "Player1", 11)
        game.score_player(10)
        game.add_player(3, "Player3", 12)
        game.score_player(15)

        splits = game.get_last_scoring_splits()
        first = splits[PlayerTeamPair(player_id=1, team_id=11)]
        assert first.split.points == 10
        assert first.action.buzz.team_id == 11

        second = splits[PlayerTeamPair(player_id=3, team_id=12)]
        assert second.split.points == 15
        assert second.action.buzz.team_id == 12

    def test_same_player_on_two_teams_has_two_entries(self):
        game = GameState()
        game.add_player(1, "P1", 11)
        game.score_player(10)
        game.add_player(1, "P1", 12)
        game.score_player(15)

        splits = game.get_last_scoring_splits()
        assert splits[PlayerTeamPair(player_id=1, team_id=11)].split.points == 10
        assert splits[PlayerTeamPair(player_id=1, team_id=12)].split.points == 15


class TestUndo:
    def test_undo_without_score_does_nothing(self):
        game = GameState()
        game.add_player(1, "Player1")
        assert game.undo() is None
        assert game.try_get_next_player() == 1

    @pytest.mark.parametrize("points", [-5, 0, 10])
    @pytest.mark.parametrize("teams", [(None, None), (1001, 1002)])
    def test_undo_restores_state(self, points, teams):
        first_team, second_team = teams
        game = GameState()
        # give the first player points so undo can't just clear the entry
        game.add_player(1, "Player1", first_team)
        game.score_player(10)

        game.add_player(1, "Player1", first_team)
        game.add_player(2, "Player2", second_team)
        game.score_player(points)
        assert _scores(game)[1] == points + 10

        assert game.undo() == 1
        assert game.try_get_next_player() == 1
        assert _scores(game)[1] == 10

        assert game.add_player(1, "Player1", first_team) is False
        assert game.add_player(2, "Player2", second_team) is False

        game.score_player(0)
        assert game.try_get_next_player() == 2

    @pytest.mark.parametrize("points", [-5, 0, 10, 20])
    def test_score_then_undo_is_exact(self, points):
        game = GameState()
        game.add_player(1, "P1", 1)
        game.add_player(2, "P2", 2)
        game.score_player(-5)
        game.add_player(3, "P3", 3)
        before = _snapshot(game)

        game.score_player(points)
        assert game.undo() == 2

        assert _snapshot(game) == before

    def test_undo_first_score_removes_ledger_entry(self):
        game = GameState()
        game.add_player(1, "P1")
        game.score_player(10)
        game.undo()
        assert game.get_last_scoring_splits() == {}

    def test_undo_persists_between_questions(self):
        game = GameState()
        game.add_player(1, "Player1")
        game.add_player(2, "Player2")
        game.score_player(10)
        game.add_player(1, "Player1")
        game.score_player(15)

        assert game.undo() == 1
        assert game.undo() == 1

        game.score_player(-5)
        assert game.try_get_next_player() == 2

    def test_undo_survives_next_question(self):
        game = GameState()
        game.add_player(1, "P1")
        game.score_player(-5)
        game.next_question()

        assert game.undo() == 1
        assert _scores(game) == {}

    def test_undo_and_withdraw_prompts_next_player_on_team(self):
        game = GameState()
        game.add_player(1, "Player 1", 1212)
        game.add_player(2, "Player 2", 1212)
        assert game.try_get_next_player() == 1
        game.score_player(-5)
        assert game.try_get_next_player() is None

        assert game.undo() == 1
        assert game.withdraw_player(1) is True
        assert game.try_get_next_player() == 2


class TestCycleResets:
    def test_clear_current_round_clears_queue_and_keeps_reader(self):
        game = GameState()
        game.reader_id = 12345
        game.add_player(1234, "Player")

        game.clear_current_round()

        assert game.try_get_next_player() is None
        assert game.add_player(1234, "Player") is True
        assert game.reader_id == 12345

    def test_clear_current_round_keeps_scores_and_history(self):
        game = GameState()
        game.add_player(1, "P1")
        game.score_player(10)
        game.clear_current_round()
        assert _scores(game) == {1: 10}
        assert game.has_history is True

    def test_clear_all_clears_queue_and_reader(self):
        game = GameState()
        game.reader_id = 12345
        game.add_player(1234, "Player")
        game.score_player(-5)

        game.clear_all()

        assert game.try_get_next_player() is None
        assert game.add_player(1234, "Player") is True
        assert game.reader_id is None
        assert game.get_last_scoring_splits() == {}
        assert game.has_history is False

    def test_next_question_clears_queue_and_keeps_reader(self):
        game = GameState()
        game.reader_id = 12345
        game.add_player(1234, "Player")
        game.score_player(-5)

        game.next_question()

        assert game.try_get_next_player() is None
        assert game.add_player(1234, "Player") is True
        assert game.reader_id == 12345
        splits = game.get_last_scoring_splits()
        assert len(splits) == 1
        assert splits[PlayerTeamPair(player_id=1234)].split.points == -5

    def test_full_buzz_cycle(self):
        game = GameState()
        assert game.add_player(1, "P1") is True
        assert game.add_player(1, "P1") is False
        assert game.try_get_next_player() == 1
        game.score_player(-5)
        assert game.try_get_next_player() is None
        assert game.add_player(1, "P1") is False
        game.next_question()
        assert game.add_player(1, "P1") is True


class TestPointCounts:
    def test_counts_each_point_value(self):
        game = GameState()
        for points in (10, 10, 15):
            game.add_player(1, "P1")
            game.score_player(points)
        game.add_player(1, "P1")
        game.score_player(-5)

        counts = game.get_point_counts()[PlayerTeamPair(player_id=1)]
        assert counts == {10: 2, 15: 1, -5: 1}

    def test_undone_scores_are_not_counted(self):
        game = GameState()
        game.add_player(1, "P1")
        game.score_player(10)
        game.undo()
        assert game.get_point_counts() == {}
