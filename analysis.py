# analysis.py
# Fatalities per aircraft manufacturer per year, plus an OLS trendline
# for one manufacturer at a time.
#
# Outputs of `python analysis.py [csv]` (in ./reports):
# - manufacturer_fatalities.csv   (flattened, year-sorted series)
# - trend_ols.txt                 (per-manufacturer OLS fit)

import logging
import sys
from collections.abc import Sequence
from dataclasses import asdict, dataclass, is_dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from load_clean import CANONICAL, clean_frame, read_incidents

logger = logging.getLogger(__name__)

# ---------- Config ----------
REPORTS_DIR = Path("reports")
RAW_FILE = Path("aircraft_incidents.csv")

# Value the trendline selector sends when no manufacturer is picked
NO_SELECTION = "None"


@dataclass(frozen=True)
class SeriesPoint:
    manufacturer: str
    year: int
    total_fatalities: int


@dataclass(frozen=True)
class TrendPoint:
    year: int
    fitted_value: float


# ---------- Aggregation ----------
def _as_frame(records) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        return records
    rows = [asdict(r) if is_dataclass(r) else dict(r) for r in records]
    return pd.DataFrame(rows, columns=CANONICAL)


def aggregate_frame(records) -> pd.DataFrame:
    """
    Sum fatalities per (manufacturer, year) and flatten into one frame
    sorted by year. Equal years keep the order in which their manufacturers
    first appear in the input.
    """
    clean = clean_frame(_as_frame(records))
    clean["rank"] = pd.factorize(clean["manufacturer"])[0]

    grouped = (clean.groupby(["manufacturer", "year"], sort=False)
                    .agg(total_fatalities=("fatalities", "sum"),
                         rank=("rank", "first"))
                    .reset_index())
    grouped = (grouped.sort_values(["year", "rank"], kind="stable")
                      .drop(columns="rank")
                      .reset_index(drop=True))
    grouped["total_fatalities"] = grouped["total_fatalities"].astype(int)
    return grouped[["manufacturer", "year", "total_fatalities"]]


def aggregate(records) -> list[SeriesPoint]:
    """
    Records -> flattened series, one point per (manufacturer, year).

    Accepts IncidentRecord objects, mappings keyed like the canonical
    columns, or a DataFrame. Records whose date does not parse are skipped
    and missing fatality counts are taken as 0, so this never raises for
    bad rows.
    """
    grouped = aggregate_frame(records)
    return [SeriesPoint(str(m), int(y), int(t))
            for m, y, t in grouped.itertuples(index=False, name=None)]


def manufacturers_of(series: Sequence[SeriesPoint]) -> list[str]:
    # dict keeps first-appearance order
    return list(dict.fromkeys(p.manufacturer for p in series))


def series_frame(points: Sequence[SeriesPoint]) -> pd.DataFrame:
    return pd.DataFrame([asdict(p) for p in points],
                        columns=["manufacturer", "year", "total_fatalities"])


def trend_frame(points: Sequence[TrendPoint]) -> pd.DataFrame:
    return pd.DataFrame([asdict(p) for p in points], columns=["year", "fitted_value"])


# ---------- Trendline ----------
def fit_trend(points: Sequence[SeriesPoint]) -> list[TrendPoint]:
    """
    Ordinary least squares over (year, total_fatalities).

        m = (nΣxy - ΣxΣy) / (nΣx² - (Σx)²)
        b = (Σy - mΣx) / n

    Returns one fitted point per input point, in input order. With no
    points, or fewer than two distinct years, there is no line to fit and
    the result is empty.
    """
    n = len(points)
    if n == 0:
        return []

    x = np.array([p.year for p in points], dtype=np.int64)
    y = np.array([p.total_fatalities for p in points], dtype=np.int64)

    # integer sums are exact; only the final divisions are floating point
    sum_x, sum_y = int(x.sum()), int(y.sum())
    sum_xy, sum_x2 = int((x * y).sum()), int((x * x).sum())

    denom = n * sum_x2 - sum_x * sum_x
    if denom == 0:
        return []

    slope = (n * sum_xy - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n
    return [TrendPoint(int(year), slope * int(year) + intercept) for year in x]


def select_manufacturer(series: Sequence[SeriesPoint],
                        selection: Optional[str]) -> list[SeriesPoint]:
    if selection is None or selection == NO_SELECTION:
        return []
    return [p for p in series if p.manufacturer == selection]


def trend_for(series: Sequence[SeriesPoint], selection: Optional[str]) -> list[TrendPoint]:
    """Trendline for the manufacturer picked in the UI (empty for none/unknown)."""
    return fit_trend(select_manufacturer(series, selection))


# ---------- OLS report ----------
def trend_summaries(series: Sequence[SeriesPoint]) -> str:
    frame = series_frame(series)
    lines = ["=== OLS: total_fatalities ~ year, per manufacturer ==="]
    for manufacturer, group in frame.groupby("manufacturer", sort=False):
        label = manufacturer or "(unknown)"
        if group["year"].nunique() < 2:
            lines.append(f"{label}: fewer than 2 distinct years, no trend (n={len(group)})")
            continue
        model = smf.ols("total_fatalities ~ year", data=group).fit()
        lines.append(f"{label}: slope={model.params['year']:.4f}, "
                     f"intercept={model.params['Intercept']:.4f}, "
                     f"r2={model.rsquared:.3f}, n={int(model.nobs)}")
    return "\n".join(lines)


def save_text(path: Path, content: str):
    path.write_text(content, encoding="utf-8")


def write_reports(series: Sequence[SeriesPoint], reports_dir: Path = REPORTS_DIR) -> list[Path]:
    reports_dir.mkdir(parents=True, exist_ok=True)
    series_path = reports_dir / "manufacturer_fatalities.csv"
    trend_path = reports_dir / "trend_ols.txt"
    series_frame(series).to_csv(series_path, index=False)
    save_text(trend_path, trend_summaries(series))
    logger.info("wrote %d series points for %d manufacturers",
                len(series), len(manufacturers_of(series)))
    return [series_path, trend_path]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    raw = Path(sys.argv[1]) if len(sys.argv) > 1 else RAW_FILE
    series = aggregate(read_incidents(str(raw)))
    produced = write_reports(series)

    print(f"\nDone. Files written to ./{REPORTS_DIR}")
    for p in produced:
        print("-", p.name)
