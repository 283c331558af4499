import os

# Temporada fija: 12 semanas de 9 hoyos
SEASON_WEEKS = 12
HOLES = 9
MIN_PAR = 3
MAX_PAR = 5
DEFAULT_PAR = 4
MIN_HANDICAP = -10.0
MAX_HANDICAP = 54.0

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./golf_league.db")
STATE_KEY = os.getenv("STATE_KEY", "golfLeagueData")

# mejores N semanas que puntúan para la clasificación
BEST_N_WEEKS = int(os.getenv("BEST_N_WEEKS", "10"))

ENTRY_FEE = int(os.getenv("ENTRY_FEE", "100"))
WEEKLY_PAYOUTS = int(os.getenv("WEEKLY_PAYOUTS", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
