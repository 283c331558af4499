import os
import tempfile

# La app lee DATABASE_URL al importar: base de datos temporal para los tests
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.mkdtemp(), "golf_league_test.db")

import pytest
from fastapi.testclient import TestClient

from app import crud, schemas
from app.main import app
from app.schemas import LeagueState
from app.storage import MemoryStateStore
from app.web import get_store


@pytest.fixture
def state():
    return LeagueState()


@pytest.fixture
def league(state):
    """Estado con dos jugadores y campo de par 36 (todos par 4)."""
    crud.set_course(state, schemas.CourseSetup(name="Pine Valley", pars=[4] * 9))
    crud.add_player(state, schemas.PlayerCreate(name="Ann", handicap=10.0))
    crud.add_player(state, schemas.PlayerCreate(name="Bob", handicap=18.4))
    return state


@pytest.fixture
def store():
    return MemoryStateStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
