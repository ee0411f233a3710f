"""
Risk severity bands for the 1-25 kejadian x dampak scale.

  1-5    Sangat Rendah
  6-10   Rendah
  11-15  Sedang
  16-20  Tinggi
  21-25  Sangat Tinggi
"""
from riskgov.errors import InvalidScoreError
from riskgov.schemas.risk_capture import ScoreBand

MIN_SCORE = 1
MAX_SCORE = 25

# (upper bound inclusive, band)
_BANDS: tuple[tuple[int, ScoreBand], ...] = (
    (5, ScoreBand(band="sangat_rendah", label="Sangat Rendah", color_key="green", range="1-5")),
    (10, ScoreBand(band="rendah", label="Rendah", color_key="lime", range="6-10")),
    (15, ScoreBand(band="sedang", label="Sedang", color_key="yellow", range="11-15")),
    (20, ScoreBand(band="tinggi", label="Tinggi", color_key="orange", range="16-20")),
    (25, ScoreBand(band="sangat_tinggi", label="Sangat Tinggi", color_key="red", range="21-25")),
)

UNKNOWN_BAND = ScoreBand(band="unknown", label="Invalid", color_key="gray")

BAND_KEYS = tuple(b.band for _, b in _BANDS)


def is_valid_score(score) -> bool:
    return isinstance(score, int) and not isinstance(score, bool) and MIN_SCORE <= score <= MAX_SCORE


def classify(score: int) -> ScoreBand:
    """Map a 1-25 score to its severity band. Raises InvalidScoreError otherwise."""
    if not is_valid_score(score):
        raise InvalidScoreError(score)
    for upper, band in _BANDS:
        if score <= upper:
            return band
    raise InvalidScoreError(score)  # unreachable


def classify_for_display(score) -> ScoreBand:
    """Badge rendering only. Never use the result as an aggregation bucket."""
    try:
        return classify(score)
    except InvalidScoreError:
        return UNKNOWN_BAND


def band_key(score: int) -> str:
    return classify(score).band


def band_index(score: int) -> int:
    """1 (sangat rendah) .. 5 (sangat tinggi)."""
    return BAND_KEYS.index(classify(score).band) + 1
