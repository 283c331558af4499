from pathlib import Path

from fastapi import Depends
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from . import crud
from .db import get_db
from .schemas import LeagueState
from .storage import StateStore, SqlStateStore, load_state

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_store(db: Session = Depends(get_db)) -> StateStore:
    return SqlStateStore(db)


def get_state(store: StateStore = Depends(get_store)) -> LeagueState:
    state = load_state(store)
    crud.check_season_end(state)
    return state
