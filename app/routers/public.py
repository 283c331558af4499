# app/routers/public.py
# Vistas de solo lectura: clasificación, historial, estadísticas y premios

from fastapi import APIRouter, Request, Depends
from fastapi.responses import HTMLResponse

from app import crud
from app.schemas import LeagueState
from app.settings import BEST_N_WEEKS, SEASON_WEEKS
from app.web import templates, get_state

router = APIRouter()


@router.get("/leaderboard", response_class=HTMLResponse, name="leaderboard")
def leaderboard(request: Request, state: LeagueState = Depends(get_state)):
    return templates.TemplateResponse(
        request,
        "leaderboard.html",
        {
            "state": state,
            "standings": crud.leaderboard(state),
            "best_n": BEST_N_WEEKS,
            "season_weeks": SEASON_WEEKS,
        },
    )


@router.get("/history", response_class=HTMLResponse, name="history")
def history(request: Request, course: str | None = None, state: LeagueState = Depends(get_state)):
    # "" en el filtro = todos los campos
    selected = course if course else None
    return templates.TemplateResponse(
        request,
        "history.html",
        {
            "state": state,
            "courses": list(state.score_history.keys()),
            "selected_course": selected,
            "rows": crud.round_history(state, selected),
        },
    )


@router.get("/players/{player_id}/stats", response_class=HTMLResponse)
def player_stats(request: Request, player_id: str, state: LeagueState = Depends(get_state)):
    try:
        stats = crud.player_stats(state, player_id)
    except crud.PlayerNotFound:
        return HTMLResponse("Player not found", status_code=404)

    return templates.TemplateResponse(
        request,
        "player_stats.html",
        {"state": state, "stats": stats},
    )


@router.get("/prizes", response_class=HTMLResponse, name="prizes")
def prizes(request: Request, state: LeagueState = Depends(get_state)):
    return templates.TemplateResponse(
        request,
        "prizes.html",
        {
            "state": state,
            "player_count": len(state.players),
            "prizes": crud.prizes(state),
        },
    )
