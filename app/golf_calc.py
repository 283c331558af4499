from decimal import Decimal, ROUND_HALF_UP

from .settings import SEASON_WEEKS, HOLES, MIN_PAR, MAX_PAR, BEST_N_WEEKS, ENTRY_FEE, WEEKLY_PAYOUTS


class ScoringInputError(ValueError):
    pass


def _check_ints(values, name: str):
    if len(values) != HOLES:
        raise ScoringInputError(f"{name}: se esperan {HOLES} valores, hay {len(values)}")
    for v in values:
        # bool es subclase de int, no lo aceptamos
        if isinstance(v, bool) or not isinstance(v, int):
            raise ScoringInputError(f"{name}: valor no entero {v!r}")


def _check_round(strokes, pars):
    _check_ints(strokes, "strokes")
    _check_ints(pars, "pars")
    if any(s < 1 for s in strokes):
        raise ScoringInputError("strokes: todos los golpes deben ser positivos")
    if any(p < MIN_PAR or p > MAX_PAR for p in pars):
        raise ScoringInputError(f"pars: cada par debe estar entre {MIN_PAR} y {MAX_PAR}")


def stableford_points(strokes: int, par: int) -> int:
    diff = strokes - par
    if diff >= 2: return 0
    if diff == 1: return 1
    if diff == 0: return 2
    if diff == -1: return 3
    return 4


def round_points(strokes, pars) -> int:
    """
    Puntos Stableford de una vuelta de 9 hoyos (0..36).
    strokes y pars: listas de 9 enteros
    """
    _check_round(strokes, pars)
    return sum(stableford_points(s, p) for s, p in zip(strokes, pars))


def season_points(weekly_points, best_n: int = BEST_N_WEEKS) -> int:
    """
    Suma de las mejores N semanas. Las semanas sin jugar (0) cuentan
    como cualquier otro valor.
    """
    if best_n < 1:
        raise ScoringInputError("best_n debe ser >= 1")
    if len(weekly_points) != SEASON_WEEKS:
        raise ScoringInputError(f"weekly_points: se esperan {SEASON_WEEKS} semanas, hay {len(weekly_points)}")
    for v in weekly_points:
        if isinstance(v, bool) or not isinstance(v, int):
            raise ScoringInputError(f"weekly_points: valor no entero {v!r}")

    ordered = sorted(weekly_points, reverse=True)
    return sum(ordered[:best_n])


def handicap_adjustment(strokes, pars, current_handicap: float) -> float:
    """
    Nuevo handicap tras una vuelta:
    - por encima del par: +0.1 por golpe
    - par o mejor: 0.2 por golpe (recorte)
    Ajuste limitado a [-1.0, +1.0], redondeo a 1 decimal (mitad hacia fuera).
    """
    _check_round(strokes, pars)

    diff = sum(strokes) - sum(pars)
    factor = Decimal("0.1") if diff > 0 else Decimal("0.2")
    adjustment = Decimal(diff) * factor
    adjustment = max(Decimal("-1.0"), min(Decimal("1.0"), adjustment))

    new_hcp = Decimal(str(current_handicap)) + adjustment
    return float(new_hcp.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def prize_distribution(player_count: int, entry_fee: int = ENTRY_FEE, weekly_payouts: int = WEEKLY_PAYOUTS) -> dict:
    """
    Bote = jugadores x inscripción.
    Mitad para premios semanales (a partes iguales), mitad para la
    clasificación final 50/30/20.
    """
    if player_count < 0:
        raise ScoringInputError("player_count no puede ser negativo")
    if weekly_payouts < 1:
        raise ScoringInputError("weekly_payouts debe ser >= 1")

    pool = player_count * entry_fee

    # 50/30/20 de la mitad del bote = 25/15/10 del total
    return {
        "pool": float(pool),
        "weekly_prize": pool / 2 / weekly_payouts,
        "season_prizes": {
            "first": pool * 25 / 100,
            "second": pool * 15 / 100,
            "third": pool * 10 / 100,
        },
    }
