from datetime import timezone

import pytest
from pydantic import ValidationError

from app import crud, schemas
from app.schemas import LeagueState, RoundRecord

CARD = [3, 4, 5, 4, 4, 4, 4, 4, 6]  # 16 pts, +2 sobre par


def player(state, name):
    return next(p for p in state.players if p.name == name)


# --- jugadores / campo ---

def test_add_player_defaults(state):
    p = crud.add_player(state, schemas.PlayerCreate(name="  Ann ", handicap=10.0))

    assert p.name == "Ann"
    assert p.weekly_points == [0] * 12
    assert p.scores == {}
    assert crud.get_player(state, p.id) is p


def test_player_ids_are_unique(state):
    a = crud.add_player(state, schemas.PlayerCreate(name="Ann", handicap=1))
    b = crud.add_player(state, schemas.PlayerCreate(name="Ann", handicap=1))
    assert a.id != b.id


@pytest.mark.parametrize("name, handicap", [("", 10), ("   ", 10), ("Ann", 99), ("Ann", "abc")])
def test_player_create_validation(name, handicap):
    with pytest.raises(ValidationError):
        schemas.PlayerCreate(name=name, handicap=handicap)


def test_set_course(state):
    crud.set_course(state, schemas.CourseSetup(name="Links", pars=[3, 4, 5, 4, 4, 3, 5, 4, 4]))
    assert state.course_name == "Links"
    assert state.course_pars == [3, 4, 5, 4, 4, 3, 5, 4, 4]


@pytest.mark.parametrize("pars", [[4] * 8, [4] * 10, [6] + [4] * 8, [2] + [4] * 8])
def test_course_setup_validation(pars):
    with pytest.raises(ValidationError):
        schemas.CourseSetup(name="Links", pars=pars)


# --- semanas ---

def test_go_to_week_clamps(state):
    assert crud.go_to_week(state, 0) == 1
    assert crud.go_to_week(state, 5) == 5
    assert crud.go_to_week(state, 40) == 12


def test_advance_week_ends_season_after_last_week(state):
    crud.go_to_week(state, 11)
    crud.advance_week(state)
    assert state.current_week == 12
    assert not state.season_ended

    crud.advance_week(state)
    assert state.current_week == 12
    assert state.season_ended


def test_check_season_end_normalises_overflow_week():
    state = LeagueState(current_week=13)
    assert crud.check_season_end(state) is True
    assert state.current_week == 12


def test_check_season_end_inside_season(state):
    assert crud.check_season_end(state) is False


# --- tarjetas ---

def test_submit_scores_updates_player_and_history(league):
    ann = player(league, "Ann")
    crud.go_to_week(league, 3)

    record = crud.submit_scores(league, ann.id, [str(s) for s in CARD])

    assert record.points == 16
    assert record.week == 3
    assert record.pars == [4] * 9
    assert ann.weekly_points[2] == 16
    assert ann.scores[3] == CARD
    assert ann.handicap == pytest.approx(10.2)
    assert league.score_history["Pine Valley"] == [record]


def test_submit_scores_accepts_ints_and_padded_text(league):
    ann = player(league, "Ann")
    raw = [" 4 "] * 8 + [4]
    record = crud.submit_scores(league, ann.id, raw)
    assert record.scores == [4] * 9


def test_rounds_are_kept_per_course(league):
    ann = player(league, "Ann")
    crud.submit_scores(league, ann.id, CARD)
    crud.advance_week(league)
    crud.set_course(league, schemas.CourseSetup(name="Oak Hill", pars=[4] * 9))
    crud.submit_scores(league, ann.id, CARD)

    assert len(league.score_history["Pine Valley"]) == 1
    assert len(league.score_history["Oak Hill"]) == 1


@pytest.mark.parametrize(
    "raw",
    [
        [""] * 9,
        ["4"] * 8 + [""],
        ["4"] * 8 + ["x"],
        ["4"] * 8 + ["4.5"],
        ["4"] * 8 + ["0"],
        ["4"] * 8 + ["-3"],
        ["4"] * 8 + [None],
        ["4"] * 8,
    ],
)
def test_submit_scores_rejects_invalid_entries(league, raw):
    ann = player(league, "Ann")
    with pytest.raises(crud.InvalidScores, match="Please enter valid scores for all holes"):
        crud.submit_scores(league, ann.id, raw)

    assert ann.weekly_points == [0] * 12
    assert ann.handicap == 10.0
    assert league.score_history == {}


def test_submit_scores_twice_same_week_is_rejected(league):
    ann = player(league, "Ann")
    crud.submit_scores(league, ann.id, CARD)

    with pytest.raises(crud.RoundAlreadyRecorded):
        crud.submit_scores(league, ann.id, [2] * 9)

    assert ann.weekly_points[0] == 16
    assert ann.handicap == pytest.approx(10.2)
    assert len(league.score_history["Pine Valley"]) == 1


def test_submit_scores_unknown_player(league):
    with pytest.raises(crud.PlayerNotFound):
        crud.submit_scores(league, "nope", CARD)


def test_submit_scores_after_season_end(league):
    crud.end_season(league)
    with pytest.raises(crud.SeasonClosed):
        crud.submit_scores(league, player(league, "Ann").id, CARD)


def test_week_table(league):
    ann = player(league, "Ann")
    crud.submit_scores(league, ann.id, CARD)

    rows = crud.week_table(league)
    assert [(r["player"].name, r["points"], r["entered"]) for r in rows] == [
        ("Ann", 16, True),
        ("Bob", 0, False),
    ]


# --- clasificación ---

def test_leaderboard_orders_by_season_points(league):
    crud.add_player(league, schemas.PlayerCreate(name="Cid", handicap=5))
    ann, bob, cid = league.players
    ann.weekly_points[:3] = [10, 10, 10]
    bob.weekly_points[:3] = [20, 20, 20]
    cid.weekly_points[:3] = [10, 10, 10]

    rows = crud.leaderboard(league)

    assert [r["name"] for r in rows] == ["Bob", "Ann", "Cid"]  # empate: orden de alta
    assert [r["position"] for r in rows] == [1, 2, 3]
    assert [r["total_points"] for r in rows] == [60, 30, 30]
    assert all(r["podium"] for r in rows)


def test_leaderboard_only_counts_best_weeks(league):
    ann, bob = league.players
    ann.weekly_points[:] = [10] * 12   # mejores 10 = 100
    bob.weekly_points[:] = [9] * 12    # mejores 10 = 90

    rows = crud.leaderboard(league)
    assert rows[0]["total_points"] == 100
    assert rows[1]["total_points"] == 90
    assert crud.leaderboard(league, best_n=12)[0]["total_points"] == 120


def test_leaderboard_podium_is_top_three(league):
    for name in ("Cid", "Dee"):
        crud.add_player(league, schemas.PlayerCreate(name=name, handicap=5))
    rows = crud.leaderboard(league)
    assert [r["podium"] for r in rows] == [True, True, True, False]


# --- historial / estadísticas ---

def test_round_history_newest_first_and_filter(league):
    ann, bob = league.players
    first = crud.submit_scores(league, ann.id, CARD)
    crud.advance_week(league)
    crud.set_course(league, schemas.CourseSetup(name="Oak Hill", pars=[4] * 9))
    second = crud.submit_scores(league, bob.id, [4] * 9)

    rows = crud.round_history(league)
    assert [r["round"] for r in rows] == [second, first]
    assert rows[0]["player_name"] == "Bob"
    assert rows[0]["course"] == "Oak Hill"

    only_pine = crud.round_history(league, "Pine Valley")
    assert [r["round"] for r in only_pine] == [first]


def test_player_stats(league):
    ann = player(league, "Ann")
    crud.submit_scores(league, ann.id, CARD)             # 16 pts, 38 golpes
    crud.advance_week(league)
    crud.submit_scores(league, ann.id, [3] * 3 + [4] * 6)  # 21 pts, 33 golpes

    stats = crud.player_stats(league, ann.id)

    assert stats["rounds_played"] == 2
    assert stats["season_points"] == 37
    assert stats["avg_points"] == pytest.approx(18.5)
    assert stats["best_week"] == 2
    assert stats["best_points"] == 21
    assert stats["avg_strokes"] == pytest.approx(35.5)
    assert stats["points_by_week"] == [(1, 16), (2, 21)]
    assert stats["tally"] == {"eagles": 0, "birdies": 4, "pars": 12, "bogeys": 1, "dbl": 1}


def test_player_stats_without_rounds(league):
    stats = crud.player_stats(league, player(league, "Bob").id)
    assert stats["rounds_played"] == 0
    assert stats["avg_points"] is None
    assert stats["best_week"] is None


def test_player_stats_unknown_player(league):
    with pytest.raises(crud.PlayerNotFound):
        crud.player_stats(league, "nope")


def test_prizes_use_registered_players(league):
    assert crud.prizes(league)["pool"] == 200


def test_round_dates_without_timezone_are_utc():
    r = RoundRecord(week=1, player_id="a", scores=[4] * 9, points=18, date="2024-05-01T10:00:00")
    assert r.date.tzinfo == timezone.utc
    assert r.date.hour == 10

    r = RoundRecord(week=1, player_id="a", scores=[4] * 9, points=18, date="2024-05-01T12:00:00+02:00")
    assert r.date.tzinfo == timezone.utc
    assert r.date.hour == 10


def test_round_history_mixes_old_and_new_dates(league):
    ann, bob = league.players
    old = RoundRecord(week=1, player_id=bob.id, scores=[4] * 9, points=18, date="2024-05-01T10:00:00")
    league.score_history["Pine Valley"] = [old]
    new = crud.submit_scores(league, ann.id, CARD)

    rows = crud.round_history(league)
    assert [r["round"] for r in rows] == [new, old]
