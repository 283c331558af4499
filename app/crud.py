import logging
from datetime import datetime, timezone
from uuid import uuid4

from . import schemas
from .golf_calc import round_points, season_points, handicap_adjustment, prize_distribution
from .schemas import LeagueState, Player, RoundRecord
from .settings import SEASON_WEEKS, HOLES, BEST_N_WEEKS

logger = logging.getLogger(__name__)


class LeagueError(Exception):
    pass


class PlayerNotFound(LeagueError):
    pass


class SeasonClosed(LeagueError):
    pass


class InvalidScores(LeagueError):
    def __init__(self, message: str = "Please enter valid scores for all holes"):
        super().__init__(message)


class RoundAlreadyRecorded(LeagueError):
    pass


#---------------------------------------------------------------------------------
# ---------------------------------- Players -------------------------------------
# --------------------------------------------------------------------------------

def get_player(state: LeagueState, player_id: str):
    for p in state.players:
        if p.id == player_id:
            return p
    return None

def add_player(state: LeagueState, data: schemas.PlayerCreate) -> Player:
    p = Player(id=uuid4().hex, name=data.name, handicap=data.handicap)
    state.players.append(p)
    logger.info("Player registered: %s (hcp %.1f)", p.name, p.handicap)
    return p


#---------------------------------------------------------------------------------
# ------------------------------------ Course ------------------------------------
# --------------------------------------------------------------------------------

def set_course(state: LeagueState, data: schemas.CourseSetup):
    state.course_name = data.name
    state.course_pars = list(data.pars)


#---------------------------------------------------------------------------------
# ------------------------------------- Weeks ------------------------------------
# --------------------------------------------------------------------------------

def go_to_week(state: LeagueState, week: int) -> int:
    state.current_week = max(1, min(SEASON_WEEKS, week))
    return state.current_week

def advance_week(state: LeagueState) -> int:
    # desde la última semana, avanzar = cerrar temporada
    if state.current_week >= SEASON_WEEKS:
        end_season(state)
    else:
        state.current_week += 1
    return state.current_week

def end_season(state: LeagueState):
    if not state.season_ended:
        logger.info("Season ended at week %s", state.current_week)
    state.season_ended = True

def check_season_end(state: LeagueState) -> bool:
    if state.current_week > SEASON_WEEKS:
        state.current_week = SEASON_WEEKS
        end_season(state)
    return state.season_ended


#---------------------------------------------------------------------------------
# ------------------------------------- Rounds -----------------------------------
# --------------------------------------------------------------------------------

def parse_scores(raw_scores) -> list[int]:
    """
    Convierte lo que llega del formulario (texto) en 9 golpes.
    Vacíos, no numéricos o <= 0 -> InvalidScores.
    """
    if len(raw_scores) != HOLES:
        raise InvalidScores()

    scores: list[int] = []
    for raw in raw_scores:
        if isinstance(raw, int) and not isinstance(raw, bool):
            value = raw
        else:
            try:
                value = int(str(raw if raw is not None else "").strip())
            except ValueError:
                raise InvalidScores() from None
        if value < 1:
            raise InvalidScores()
        scores.append(value)

    return scores


def submit_scores(state: LeagueState, player_id: str, raw_scores) -> RoundRecord:
    player = get_player(state, player_id)
    if player is None:
        raise PlayerNotFound(f"Player {player_id} not found")

    if state.season_ended:
        raise SeasonClosed("The season has ended")

    scores = parse_scores(raw_scores)

    week = state.current_week
    if week in player.scores:
        raise RoundAlreadyRecorded(f"Scores for {player.name} already recorded for week {week}")

    pars = list(state.course_pars)
    points = round_points(scores, pars)
    new_hcp = handicap_adjustment(scores, pars, player.handicap)

    record = RoundRecord(
        week=week,
        player_id=player.id,
        scores=scores,
        pars=pars,
        points=points,
        date=datetime.now(timezone.utc),
    )
    state.score_history.setdefault(state.course_name, []).append(record)

    player.scores[week] = scores
    player.weekly_points[week - 1] = points
    player.handicap = new_hcp

    logger.info(
        "Round saved: %s week %s -> %s pts, hcp %.1f",
        player.name, week, points, new_hcp,
    )
    return record


def round_history(state: LeagueState, course_name: str | None = None):
    names = {p.id: p.name for p in state.players}

    rows = []
    for course, records in state.score_history.items():
        if course_name is not None and course != course_name:
            continue
        for r in records:
            rows.append({
                "course": course,
                "player_name": names.get(r.player_id, "?"),
                "round": r,
            })

    # más reciente primero; mismo instante -> el último registrado primero
    ordered = sorted(enumerate(rows), key=lambda t: (t[1]["round"].date, t[0]), reverse=True)
    return [row for _, row in ordered]


#---------------------------------------------------------------------------------
# ------------------------------- Tablas / Ranking -------------------------------
# --------------------------------------------------------------------------------

def week_table(state: LeagueState):
    idx = min(state.current_week, SEASON_WEEKS) - 1
    return [
        {
            "player": p,
            "handicap": p.handicap,
            "points": p.weekly_points[idx],
            "entered": state.current_week in p.scores,
        }
        for p in state.players
    ]


def leaderboard(state: LeagueState, best_n: int = BEST_N_WEEKS):
    idx = min(state.current_week, SEASON_WEEKS) - 1

    rows = [
        {
            "player": p,
            "name": p.name,
            "total_points": season_points(p.weekly_points, best_n),
            "weekly_points": p.weekly_points[idx],
            "handicap": p.handicap,
        }
        for p in state.players
    ]
    # sort estable: empates mantienen el orden de alta
    rows.sort(key=lambda r: r["total_points"], reverse=True)

    for i, r in enumerate(rows, start=1):
        r["position"] = i
        r["podium"] = i <= 3
    return rows


def player_stats(state: LeagueState, player_id: str, best_n: int = BEST_N_WEEKS):
    """
    Resumen de temporada de un jugador: medias, mejor semana y reparto
    de resultados por hoyo (solo vueltas con pares guardados).
    """
    p = get_player(state, player_id)
    if p is None:
        raise PlayerNotFound(f"Player {player_id} not found")

    weeks = sorted(p.scores)
    rounds_played = len(weeks)

    points_by_week = [(w, p.weekly_points[w - 1]) for w in weeks]
    best_week = None
    best_points = None
    for w, pts in points_by_week:
        if best_points is None or pts > best_points:
            best_week, best_points = w, pts

    strokes_totals = [sum(p.scores[w]) for w in weeks]

    tally = {"eagles": 0, "birdies": 0, "pars": 0, "bogeys": 0, "dbl": 0}
    for records in state.score_history.values():
        for r in records:
            if r.player_id != p.id or r.pars is None:
                continue
            for g, par in zip(r.scores, r.pars):
                d = g - par
                if d <= -2: tally["eagles"] += 1
                elif d == -1: tally["birdies"] += 1
                elif d == 0: tally["pars"] += 1
                elif d == 1: tally["bogeys"] += 1
                else: tally["dbl"] += 1

    return {
        "player": p,
        "rounds_played": rounds_played,
        "season_points": season_points(p.weekly_points, best_n),
        "avg_points": (sum(pts for _, pts in points_by_week) / rounds_played) if rounds_played else None,
        "best_week": best_week,
        "best_points": best_points,
        "avg_strokes": (sum(strokes_totals) / rounds_played) if rounds_played else None,
        "points_by_week": points_by_week,
        "tally": tally,
    }


def prizes(state: LeagueState):
    return prize_distribution(len(state.players))
