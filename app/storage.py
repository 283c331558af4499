"""
Persistencia del estado de la temporada.

Todo el estado (jugadores, historial, semana actual, campo) se guarda
como un único JSON bajo una clave, igual que hacía la versión de
navegador con localStorage. Las rutas reciben un StateStore inyectado,
así los cálculos se pueden probar sin base de datos.
"""
import json
import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .schemas import LeagueState
from .settings import STATE_KEY

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


def dump_state(state: LeagueState, indent: int | None = None) -> str:
    data = state.model_dump(mode="json", by_alias=True)
    # courseHistory: copia de scoreHistory, se mantiene por compatibilidad del formato
    data["courseHistory"] = data["scoreHistory"]
    return json.dumps(data, indent=indent)


def parse_state(raw: str | bytes) -> LeagueState:
    # courseHistory solo se usa si scoreHistory viene vacío (LeagueState)
    return LeagueState.model_validate_json(raw)


class StateStore(ABC):
    @abstractmethod
    def load(self) -> LeagueState | None:
        """Devuelve el estado guardado o None si no hay nada."""

    @abstractmethod
    def save(self, state: LeagueState) -> None:
        pass


class SqlStateStore(StateStore):
    def __init__(self, db: Session, key: str = STATE_KEY):
        self.db = db
        self.key = key

    def load(self) -> LeagueState | None:
        try:
            row = self.db.get(models.LeagueStateRow, self.key)
        except SQLAlchemyError as e:
            raise StorageError(f"no se pudo leer '{self.key}'") from e

        if row is None:
            return None
        return parse_state(row.data)

    def save(self, state: LeagueState) -> None:
        raw = dump_state(state)
        try:
            row = self.db.get(models.LeagueStateRow, self.key)
            if row is None:
                row = models.LeagueStateRow(key=self.key, data=raw)
                self.db.add(row)
            else:
                row.data = raw
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"no se pudo guardar '{self.key}'") from e


class MemoryStateStore(StateStore):
    def __init__(self, raw: str | None = None):
        self.raw = raw

    def load(self) -> LeagueState | None:
        if self.raw is None:
            return None
        return parse_state(self.raw)

    def save(self, state: LeagueState) -> None:
        self.raw = dump_state(state)


# ---------------------------------------------------------------------------
# Frontera: los fallos de persistencia se registran y nunca llegan al usuario
# ---------------------------------------------------------------------------

def load_state(store: StateStore) -> LeagueState:
    try:
        state = store.load()
    except (StorageError, ValidationError) as e:
        logger.error("Error loading league state: %s", e)
        return LeagueState()

    return state if state is not None else LeagueState()


def save_state(store: StateStore, state: LeagueState) -> None:
    # sin reintentos: el estado sigue en memoria para este request
    try:
        store.save(state)
    except StorageError as e:
        logger.error("Error saving league state: %s", e)
