from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .settings import (
    SEASON_WEEKS, HOLES, MIN_PAR, MAX_PAR, DEFAULT_PAR, MIN_HANDICAP, MAX_HANDICAP,
)


# ---------------------------------------------------------------------------
# ------------------------------ Formularios --------------------------------
# ---------------------------------------------------------------------------

class PlayerCreate(BaseModel):
    name: str
    handicap: float = Field(ge=MIN_HANDICAP, le=MAX_HANDICAP)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v


class CourseSetup(BaseModel):
    name: str = ""
    pars: list[int] = Field(min_length=HOLES, max_length=HOLES)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("pars")
    @classmethod
    def pars_in_range(cls, v: list[int]) -> list[int]:
        for p in v:
            if p < MIN_PAR or p > MAX_PAR:
                raise ValueError(f"par must be between {MIN_PAR} and {MAX_PAR}")
        return v


# ---------------------------------------------------------------------------
# -------------------------- Estado de la temporada -------------------------
# ---------------------------------------------------------------------------
#
# Los alias son las claves del JSON guardado (camelCase).

class Player(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    name: str
    handicap: float
    scores: dict[int, list[int]] = Field(default_factory=dict)  # semana -> 9 golpes
    weekly_points: list[int] = Field(
        default_factory=lambda: [0] * SEASON_WEEKS,
        alias="weeklyPoints",
    )

    @field_validator("weekly_points")
    @classmethod
    def one_entry_per_week(cls, v: list[int]) -> list[int]:
        if len(v) != SEASON_WEEKS:
            raise ValueError(f"weeklyPoints must have {SEASON_WEEKS} entries")
        return v


class RoundRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    week: int = Field(ge=1, le=SEASON_WEEKS)
    player_id: str = Field(alias="playerId")
    scores: list[int] = Field(min_length=HOLES, max_length=HOLES)
    # pares del campo ese día (None en datos antiguos sin este campo)
    pars: list[int] | None = None
    points: int
    date: datetime

    @field_validator("date")
    @classmethod
    def date_in_utc(cls, v: datetime) -> datetime:
        # sin zona horaria -> se asume UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class LeagueState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    players: list[Player] = Field(default_factory=list)
    # nombre de campo -> vueltas registradas (solo se añaden)
    score_history: dict[str, list[RoundRecord]] = Field(default_factory=dict, alias="scoreHistory")
    # puede llegar > SEASON_WEEKS desde un JSON antiguo; crud.check_season_end lo normaliza
    current_week: int = Field(1, ge=1, alias="currentWeek")
    course_name: str = Field("", alias="courseName")
    course_pars: list[int] = Field(
        default_factory=lambda: [DEFAULT_PAR] * HOLES,
        alias="coursePars",
    )
    season_ended: bool = Field(False, alias="seasonEnded")

    @model_validator(mode="before")
    @classmethod
    def history_from_course_history(cls, data):
        # la versión de navegador solo escribía las vueltas en courseHistory
        if isinstance(data, dict) and data.get("courseHistory") \
                and not data.get("scoreHistory") and not data.get("score_history"):
            data = {**data, "scoreHistory": data["courseHistory"]}
        return data

    @field_validator("course_pars")
    @classmethod
    def nine_pars(cls, v: list[int]) -> list[int]:
        if len(v) != HOLES:
            raise ValueError(f"coursePars must have {HOLES} entries")
        return v
