"""
Integration tests for the tournament system.
"""

import pytest
import tempfile

from rps_tournament.game.player import Player, MatchOutcome
from rps_tournament.tournament.errors import InputValidationError, TournamentAlreadyRunningError
from rps_tournament.tournament.leaderboard import LeaderboardEntry, get_leaderboard, get_champion
from rps_tournament.tournament.match import MatchResult
from rps_tournament.tournament.display import (
    format_leaderboard,
    format_player_details,
    format_win_matrix
)
from rps_tournament.tournament.renderer import RecordingRenderer, ConsoleRenderer
from rps_tournament.tournament.runner import TournamentRunner, TournamentConfig
from rps_tournament.tournament.scheduler import generate_round_robin_schedule, num_matchups
from rps_tournament.tournament.storage import TournamentStorage, TournamentResult


def make_players(*specs):
    """Build players from (name, moves) pairs."""
    return [Player(name, list(moves)) for name, moves in specs]


class TestScheduler:
    """Tests for tournament scheduling."""

    def test_round_robin_matchup_count(self):
        """Test correct number of matchups generated."""
        players = make_players(("a", "r"), ("b", "r"), ("c", "r"), ("d", "r"))
        matchups = generate_round_robin_schedule(players)

        # n*(n-1)/2 = 4*3/2 = 6 matchups
        assert len(matchups) == 6

    def test_round_robin_order(self):
        """Pairs come out in i<j nested order."""
        players = make_players(("a", "r"), ("b", "r"), ("c", "r"), ("d", "r"))
        matchups = generate_round_robin_schedule(players)

        pairs = [(m.player_a.name, m.player_b.name) for m in matchups]
        assert pairs == [
            ("a", "b"), ("a", "c"), ("a", "d"),
            ("b", "c"), ("b", "d"),
            ("c", "d"),
        ]

    def test_round_robin_pairs_unique(self):
        players = make_players(*[(str(i), "r") for i in range(7)])
        matchups = generate_round_robin_schedule(players)

        pairs = {frozenset((m.index_a, m.index_b)) for m in matchups}
        assert len(pairs) == len(matchups) == 21
        assert all(m.index_a < m.index_b for m in matchups)

    def test_too_few_players(self):
        with pytest.raises(InputValidationError):
            generate_round_robin_schedule(make_players(("solo", "r")))

    def test_num_matchups_calculation(self):
        """Test number of matchups calculation."""
        assert num_matchups(['a', 'b']) == 1
        assert num_matchups(['a', 'b', 'c']) == 3
        assert num_matchups(['a', 'b', 'c', 'd']) == 6
        assert num_matchups(['a', 'b', 'c', 'd', 'e']) == 10

    def test_matchup_label(self):
        players = make_players(("Alice", "r"), ("Bob", "s"))
        matchup = generate_round_robin_schedule(players)[0]
        assert matchup.label == "Alice vs Bob"
        assert matchup.matchup_id == "0_vs_1"


class TestLeaderboard:
    """Tests for leaderboard ranking."""

    def _player(self, name, wins=0, losses=0, ties=0, round_wins=0):
        player = Player(name, ["r"])
        player.stats.match_wins = wins
        player.stats.match_losses = losses
        player.stats.match_ties = ties
        player.stats.round_wins = round_wins
        return player

    def test_sorted_by_wins(self):
        players = [self._player("a", wins=1), self._player("b", wins=3), self._player("c", wins=2)]
        names = [e.name for e in get_leaderboard(players)]
        assert names == ["b", "c", "a"]

    def test_fewer_losses_break_ties(self):
        players = [self._player("a", wins=2, losses=2), self._player("b", wins=2, losses=1)]
        assert [e.name for e in get_leaderboard(players)] == ["b", "a"]

    def test_round_wins_break_ties(self):
        players = [
            self._player("a", wins=2, losses=1, round_wins=4),
            self._player("b", wins=2, losses=1, round_wins=7),
        ]
        assert [e.name for e in get_leaderboard(players)] == ["b", "a"]

    def test_full_tie_keeps_input_order(self):
        players = [self._player(n, wins=1, losses=1, round_wins=2) for n in ["x", "y", "z"]]
        assert [e.name for e in get_leaderboard(players)] == ["x", "y", "z"]

    def test_ranks_and_highlight(self):
        players = [self._player("a", wins=1), self._player("b", wins=2), self._player("c", wins=2, losses=1)]
        board = get_leaderboard(players)

        assert [e.rank for e in board] == [1, 2, 3]
        assert [e.highlight for e in board] == [True, True, False]

    def test_does_not_mutate_players(self):
        players = make_players(("a", "rp"), ("b", "ss"))
        before = [(p.name, p.stats.match_wins, len(p.stats.history)) for p in players]

        get_leaderboard(players)
        get_leaderboard(players)

        assert [(p.name, p.stats.match_wins, len(p.stats.history)) for p in players] == before

    def test_champion(self):
        players = [self._player("a", wins=1), self._player("b", wins=2)]
        assert get_champion(players) == "b"
        assert get_champion([]) is None


class TestTournamentRunner:
    """Integration tests for tournament runner."""

    def test_three_way_cycle(self):
        """Rock, paper and scissors each win once; input order decides."""
        players = make_players(("A", "r"), ("B", "p"), ("C", "s"))
        runner = TournamentRunner()

        result = runner.run(players, tournament_id="cycle")

        assert result.tournament_id == "cycle"
        assert result.status == "completed"
        assert len(result.matches) == 3
        for entry in result.leaderboard:
            assert (entry.wins, entry.losses, entry.ties) == (1, 1, 0)
            assert entry.round_wins == 1
        assert [e.name for e in result.leaderboard] == ["A", "B", "C"]
        assert result.champion == "A"

    def test_every_player_plays_everyone(self):
        players = make_players(
            ("a", "rps"), ("b", "prs"), ("c", "ss"), ("d", ""), ("e", "rrrr")
        )
        runner = TournamentRunner()
        result = runner.run(players)

        assert len(result.matches) == 10
        for p in players:
            stats = p.stats
            assert stats.matches_played == 4
            assert len(stats.history) == 4
            opponents = {r.opponent for r in stats.history}
            assert opponents == {q.name for q in players} - {p.name}

    def test_match_outcomes_symmetric(self):
        players = make_players(("a", "rps"), ("b", "prs"), ("c", "ss"), ("d", "p"))
        result = TournamentRunner().run(players)

        total_wins = sum(e.wins for e in result.leaderboard)
        total_losses = sum(e.losses for e in result.leaderboard)
        assert total_wins == total_losses
        for match in result.matches:
            assert match.outcome_b is match.outcome_a.opposite

    def test_round_totals_match_history(self):
        players = make_players(("a", "rpsr"), ("b", "prs"), ("c", "sspp"))
        TournamentRunner().run(players)

        for p in players:
            stats = p.stats
            assert stats.rounds_played == sum(r.rounds_played for r in stats.history)

    def test_reproducible(self):
        specs = [("a", "rpsrp"), ("b", "pprss"), ("c", "srrps"), ("d", "rrrrr")]
        first = TournamentRunner().run(make_players(*specs))
        second = TournamentRunner().run(make_players(*specs))

        assert [e.to_dict() for e in first.leaderboard] == [e.to_dict() for e in second.leaderboard]

    def test_too_few_players(self):
        renderer = RecordingRenderer()
        runner = TournamentRunner(renderer=renderer)

        with pytest.raises(InputValidationError):
            runner.run(make_players(("solo", "r")))

        assert renderer.events == []
        assert not runner.is_running

    def test_per_run_renderer_and_source(self):
        """A renderer and source passed to run apply to that run only."""
        default = RecordingRenderer()
        runner = TournamentRunner(TournamentConfig(source="config"), renderer=default)
        recorder = RecordingRenderer()

        result = runner.run(make_players(("a", "r"), ("b", "s")), renderer=recorder, source="inline")

        assert result.source == "inline"
        assert recorder.of_type("result") == [{"type": "result", "winner": "a"}]
        assert default.events == []
        assert runner.renderer is default
        assert runner.run(make_players(("a", "r"), ("b", "s"))).source == "config"

    def test_players_must_be_fresh(self):
        players = make_players(("a", "r"), ("b", "s"))
        runner = TournamentRunner()
        runner.run(players)

        with pytest.raises(InputValidationError):
            runner.run(players)

    def test_run_safely_reports_errors(self):
        renderer = RecordingRenderer()
        runner = TournamentRunner(renderer=renderer)

        result = runner.run_safely(lambda: make_players(("solo", "r")))

        assert result is None
        assert renderer.events == [
            {'type': 'error', 'message': 'At least 2 players with moves are required'}
        ]
        assert not runner.is_running

    def test_reentrancy_guard(self):
        """A second run started while one is in progress is rejected."""
        runner = TournamentRunner()
        inner_errors = []

        def load_players():
            with pytest.raises(TournamentAlreadyRunningError):
                runner.run(make_players(("x", "r"), ("y", "p")))
            inner_errors.append(True)
            assert runner.is_running
            return make_players(("a", "r"), ("b", "p"))

        result = runner.run_safely(load_players)

        assert inner_errors == [True]
        assert result is not None
        assert result.champion == "b"
        assert not runner.is_running

    def test_guard_released_after_failure(self):
        runner = TournamentRunner()

        def broken_loader():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            runner.run_safely(broken_loader)

        assert not runner.is_running
        assert runner.run(make_players(("a", "r"), ("b", "s"))).champion == "a"

    def test_event_order(self):
        """Leaderboard before the first match, then one update per match."""
        renderer = RecordingRenderer()
        runner = TournamentRunner(renderer=renderer)
        runner.run(make_players(("a", "rp"), ("b", "ss"), ("c", "pr")))

        types = [e['type'] for e in renderer.events]
        assert types[0] == 'start'
        assert types[1] == 'leaderboard'
        assert types[-1] == 'result'
        assert types.count('match_start') == 3
        assert types.count('round') == 6
        assert types.count('leaderboard') == 4

        initial = renderer.events[1]['leaderboard']
        assert all(row['wins'] == row['losses'] == row['ties'] == 0 for row in initial)

        fractions = [e['fraction'] for e in renderer.of_type('progress')]
        assert fractions == pytest.approx([1 / 3, 2 / 3, 1.0])

        # Each match: start, rounds, result, leaderboard, progress
        first_match = types[2:9]
        assert first_match == ['match_start', 'round', 'round', 'match_result',
                               'leaderboard', 'progress', 'match_start']

        assert renderer.of_type('result') == [{'type': 'result', 'winner': 'a'}]

    def test_pacing_hook(self):
        """Pacing is called after every round and match, scaled by speed."""
        delays = []
        config = TournamentConfig(speed_multiplier=2.0, pacing=delays.append)
        runner = TournamentRunner(config=config)
        runner.run(make_players(("a", "rp"), ("b", "ss")))

        assert delays == pytest.approx([0.15, 0.15, 0.1])

    def test_no_pacing_by_default(self):
        runner = TournamentRunner()
        assert runner.config.pacing is None

    def test_set_speed(self):
        runner = TournamentRunner()
        runner.set_speed(3.0)
        assert runner.config.speed_multiplier == 3.0

        with pytest.raises(InputValidationError):
            runner.set_speed(0)

    def test_invalid_speed_in_config(self):
        with pytest.raises(InputValidationError):
            TournamentRunner(TournamentConfig(speed_multiplier=-1))

    def test_results_saved(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config = TournamentConfig(save_results=True, data_dir=tmpdir, source="test.csv")
            runner = TournamentRunner(config=config)
            runner.run(make_players(("a", "r"), ("b", "s")), tournament_id="saved")

            loaded = TournamentStorage(tmpdir).load_tournament("saved")
            assert loaded is not None
            assert loaded.source == "test.csv"
            assert loaded.champion == "a"

    def test_console_renderer(self, capsys):
        renderer = ConsoleRenderer(verbose=True, show_details=True)
        runner = TournamentRunner(renderer=renderer)
        runner.run(make_players(("Alice", "rp"), ("Bob", "ss")), tournament_id="console")

        out = capsys.readouterr().out
        assert "Tournament: console" in out
        assert "Alice vs Bob" in out
        assert "FINAL STANDINGS" in out
        assert "*** Champion: Alice ***" in out


class TestTournamentStorage:
    """Tests for tournament storage."""

    @pytest.fixture
    def temp_storage(self):
        """Create a temporary storage for testing."""
        with tempfile.TemporaryDirectory() as tmpdir:
            storage = TournamentStorage(tmpdir)
            yield storage

    def _result(self, tournament_id='test'):
        players = make_players(("a", "rr"), ("b", "ps"), ("c", "ss"))
        return TournamentRunner().run(players, tournament_id=tournament_id)

    def test_save_and_load(self, temp_storage):
        result = self._result()
        temp_storage.save_tournament(result)

        loaded = temp_storage.load_tournament('test')
        assert loaded.status == 'completed'
        assert [e.name for e in loaded.leaderboard] == [e.name for e in result.leaderboard]
        assert [e.rank for e in loaded.leaderboard] == [1, 2, 3]
        assert len(loaded.matches) == 3
        assert loaded.matches[0].player_a == 'a'
        assert loaded.matches[0].player_b == 'b'

    def test_histories_rebuilt(self, temp_storage):
        result = self._result()
        temp_storage.save_tournament(result)

        loaded = temp_storage.load_tournament('test')
        for original, restored in zip(result.leaderboard, loaded.leaderboard):
            assert restored.history == original.history
            assert restored.highlight == original.highlight

    def test_duplicate_names_keep_own_histories(self, temp_storage):
        """Players sharing a name each load back with their own matches."""
        players = make_players(("twin", "rr"), ("twin", "ss"), ("c", "pp"))
        result = TournamentRunner().run(players, tournament_id="twins")
        temp_storage.save_tournament(result)

        loaded = temp_storage.load_tournament("twins")
        assert [e.name for e in loaded.leaderboard] == ["twin", "twin", "c"]
        for original, restored in zip(result.leaderboard, loaded.leaderboard):
            assert len(restored.history) == 2
            assert restored.history == original.history

    def test_missing_tournament(self, temp_storage):
        assert temp_storage.load_tournament('nope') is None

    def test_list_tournaments(self, temp_storage):
        """Test listing tournaments."""
        temp_storage.save_tournament(self._result('test1'))
        temp_storage.save_tournament(self._result('test2'))

        tournaments = temp_storage.list_tournaments()
        assert len(tournaments) == 2
        assert {t['num_players'] for t in tournaments} == {3}


class TestTournamentResult:
    """Tests for TournamentResult methods."""

    def test_get_entry(self):
        result = TournamentResult(
            tournament_id='test',
            created_at='2024-01-01',
            completed_at='2024-01-01',
            status='completed',
            source='',
            leaderboard=[LeaderboardEntry('a', wins=1, rank=1), LeaderboardEntry('b', rank=2)],
            matches=[MatchResult('a', 'b', 2, 1, 0, MatchOutcome.WIN, MatchOutcome.LOSS)]
        )

        assert result.get_entry('b').rank == 2
        assert result.get_entry('z') is None
        data = result.to_dict()
        assert data['champion'] == 'a'
        assert data['matches'][0]['winner'] == 'a'


class TestDisplay:
    """Tests for terminal formatting."""

    def _leaderboard(self):
        players = make_players(("Alice", "rp"), ("Bob", "ss"), ("Cid", "pp"))
        TournamentRunner().run(players)
        return get_leaderboard(players)

    def test_format_leaderboard(self):
        text = format_leaderboard(self._leaderboard())
        assert "LIVE LEADERBOARD" in text
        assert "Alice" in text and "Bob" in text

    def test_format_player_details(self):
        entry = self._leaderboard()[0]
        text = format_player_details(entry)
        assert entry.name in text
        for record in entry.history:
            assert record.opponent in text

    def test_format_player_details_empty(self):
        assert "No matches played" in format_player_details(LeaderboardEntry("x"))

    def test_format_win_matrix(self):
        text = format_win_matrix(self._leaderboard())
        assert "Results (row vs column)" in text
