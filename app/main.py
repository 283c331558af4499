import logging

from fastapi import FastAPI, Request, Depends, Form
from fastapi import UploadFile, File
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from . import crud, schemas
from .db import Base, engine
from .golf_calc import ScoringInputError
from .routers import public
from .schemas import LeagueState
from .settings import SEASON_WEEKS, HOLES, MIN_PAR, MAX_PAR, LOG_LEVEL
from .storage import StateStore, save_state, dump_state, parse_state
from .web import templates, get_store, get_state

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


Base.metadata.create_all(bind=engine)


app = FastAPI(title="Golf League")

app.include_router(public.router)


def render_home(request: Request, state: LeagueState, error: str | None = None, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "state": state,
            "rows": crud.week_table(state),
            "standings": crud.leaderboard(state),
            "season_weeks": SEASON_WEEKS,
            "min_par": MIN_PAR,
            "max_par": MAX_PAR,
            "error": error,
        },
        status_code=status_code,
    )


def first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(x) for x in err.get("loc", ()))
    return f"{field}: {err['msg']}" if field else err["msg"]


# ---------------------------------------------------------------------------------

@app.get("/", response_class=HTMLResponse, name="home")
def home(request: Request, state: LeagueState = Depends(get_state)):
    return render_home(request, state)


#--------------------------------------------------------------------------------
#------------------------------------ COURSE ------------------------------------
#--------------------------------------------------------------------------------

@app.post("/course")
async def course_save(
    request: Request,
    store: StateStore = Depends(get_store),
    state: LeagueState = Depends(get_state),
):
    form = await request.form()

    try:
        pars = [int(form.get(f"par_{i}") or "") for i in range(1, HOLES + 1)]
    except ValueError:
        return render_home(request, state, error=f"Each par must be a number between {MIN_PAR} and {MAX_PAR}", status_code=400)

    try:
        data = schemas.CourseSetup(name=form.get("course_name") or "", pars=pars)
    except ValidationError as e:
        return render_home(request, state, error=first_error(e), status_code=400)

    crud.set_course(state, data)
    save_state(store, state)
    return RedirectResponse("/", status_code=303)


#--------------------------------------------------------------------------------
#------------------------------------ PLAYERS -----------------------------------
#--------------------------------------------------------------------------------

@app.post("/players/new")
def player_new(
    request: Request,
    name: str = Form(""),
    handicap: str = Form(""),
    store: StateStore = Depends(get_store),
    state: LeagueState = Depends(get_state),
):
    try:
        data = schemas.PlayerCreate(name=name, handicap=handicap)
    except ValidationError as e:
        return render_home(request, state, error=first_error(e), status_code=400)

    crud.add_player(state, data)
    save_state(store, state)
    return RedirectResponse("/", status_code=303)


# ---- TARJETA DE LA SEMANA ----
@app.get("/players/{player_id}/scores", response_class=HTMLResponse)
def score_entry_form(request: Request, player_id: str, state: LeagueState = Depends(get_state)):
    player = crud.get_player(state, player_id)
    if not player:
        return HTMLResponse("Player not found", status_code=404)

    existing = player.scores.get(state.current_week)
    return templates.TemplateResponse(
        request,
        "score_entry.html",
        {
            "state": state,
            "player": player,
            "values": existing or [""] * HOLES,
            "locked": existing is not None or state.season_ended,
            "error": None,
        },
    )


@app.post("/players/{player_id}/scores")
async def score_entry_save(
    request: Request,
    player_id: str,
    store: StateStore = Depends(get_store),
    state: LeagueState = Depends(get_state),
):
    form = await request.form()
    raw_scores = [form.get(f"g_{i}") for i in range(1, HOLES + 1)]

    try:
        crud.submit_scores(state, player_id, raw_scores)
    except crud.PlayerNotFound:
        return HTMLResponse("Player not found", status_code=404)
    except (crud.InvalidScores, ScoringInputError) as e:
        return render_score_error(request, state, player_id, raw_scores, str(e), 400)
    except (crud.RoundAlreadyRecorded, crud.SeasonClosed) as e:
        return render_score_error(request, state, player_id, raw_scores, str(e), 409)

    save_state(store, state)
    return RedirectResponse("/", status_code=303)


def render_score_error(request, state, player_id, raw_scores, message, status_code):
    return templates.TemplateResponse(
        request,
        "score_entry.html",
        {
            "state": state,
            "player": crud.get_player(state, player_id),
            "values": ["" if v is None else v for v in raw_scores],
            "locked": False,
            "error": message,
        },
        status_code=status_code,
    )


#--------------------------------------------------------------------------------
#------------------------------------ SEMANAS -----------------------------------
#--------------------------------------------------------------------------------

@app.post("/week/prev")
def week_prev(store: StateStore = Depends(get_store), state: LeagueState = Depends(get_state)):
    crud.go_to_week(state, state.current_week - 1)
    save_state(store, state)
    return RedirectResponse("/", status_code=303)


@app.post("/week/next")
def week_next(store: StateStore = Depends(get_store), state: LeagueState = Depends(get_state)):
    crud.advance_week(state)
    save_state(store, state)
    return RedirectResponse("/", status_code=303)


@app.post("/season/end")
def season_end(store: StateStore = Depends(get_store), state: LeagueState = Depends(get_state)):
    crud.end_season(state)
    save_state(store, state)
    return RedirectResponse("/", status_code=303)


#--------------------------------------------------------------------------------
#------------------------------- EXPORT / IMPORT --------------------------------
#--------------------------------------------------------------------------------

@app.get("/export")
def export_state(state: LeagueState = Depends(get_state)):
    return Response(
        content=dump_state(state, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="golf_league.json"'},
    )


@app.post("/import")
async def import_state(
    request: Request,
    file: UploadFile = File(...),
    store: StateStore = Depends(get_store),
    state: LeagueState = Depends(get_state),
):
    raw = await file.read()
    try:
        new_state = parse_state(raw)
    except ValidationError as e:
        logger.warning("Rejected import file %s: %s", file.filename, e)
        return render_home(request, state, error="Invalid league file", status_code=400)

    crud.check_season_end(new_state)
    save_state(store, new_state)
    logger.info("League state imported from %s (%s players)", file.filename, len(new_state.players))
    return RedirectResponse("/", status_code=303)


@app.get("/health")
def health():
    return {"status": "ok"}
