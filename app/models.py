from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime

from .db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class LeagueStateRow(Base):
    """Una fila por clave: el estado completo de la temporada en JSON."""
    __tablename__ = "league_state"

    key = Column(String, primary_key=True, index=True)
    data = Column(Text, nullable=False)

    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
