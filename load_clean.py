# load_clean.py
# Usage:
#   from load_clean import load_and_clean
#   df = load_and_clean("aircraft_incidents.csv",
#                       out_csv="incidents_clean.csv")

import logging
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd
from pandas.api.types import is_number

logger = logging.getLogger(__name__)

# Source column -> canonical column
RAW_COLUMNS = {
    "Event_Date": "event_date",
    "Total_Fatal_Injuries": "fatalities",
    "Make": "manufacturer",
}
CANONICAL = list(RAW_COLUMNS.values())


@dataclass(frozen=True)
class IncidentRecord:
    event_date: Any
    fatalities: Any = None
    manufacturer: str = ""


def _year_of(value: Any) -> float:
    # bare numbers are not dates (pandas would read them as epoch nanoseconds)
    if is_number(value):
        return np.nan
    stamp = pd.to_datetime(value, errors="coerce")
    if stamp is None or pd.isna(stamp):
        return np.nan
    # year as written, in the value's own timezone
    return float(stamp.year)


def _coerce_years(values: pd.Series) -> pd.Series:
    """Calendar year per value (float, NaN where the date does not parse)."""
    return values.astype(object).map(_year_of).astype(float)


def _coerce_fatalities(values: pd.Series) -> pd.Series:
    counts = pd.to_numeric(values.astype(object), errors="coerce").astype(float)
    counts = counts.replace([np.inf, -np.inf], np.nan)
    return counts.fillna(0).clip(lower=0).astype(int)


def parse_year(value: Any) -> Optional[int]:
    """
    Year of a date-like value, or None when it is missing or unparseable.
    Records with no year are excluded from aggregation rather than failing it.
    """
    year = _coerce_years(pd.Series([value], dtype=object)).iloc[0]
    if pd.isna(year):
        return None
    return int(year)


def parse_fatalities(value: Any) -> int:
    """
    Fatality count as a non-negative int. Missing or non-numeric values
    count as 0 on purpose: the chart treats them as "no reported deaths".
    """
    return int(_coerce_fatalities(pd.Series([value], dtype=object)).iloc[0])


def clean_frame(df: pd.DataFrame) -> pd.DataFrame:
    # Missing canonical columns behave like all-missing values
    df = df.reindex(columns=CANONICAL)

    years = _coerce_years(df["event_date"])
    keep = years.notna()
    dropped = int((~keep).sum())
    if dropped:
        logger.info("dropped %d records with unparseable event dates", dropped)

    out = pd.DataFrame({
        # no case/whitespace folding: "BOEING" and "Boeing" stay separate groups
        "manufacturer": df.loc[keep, "manufacturer"].fillna("").astype(str),
        "year": years[keep].astype(int),
        "fatalities": _coerce_fatalities(df.loc[keep, "fatalities"]),
    })
    return out.reset_index(drop=True)


def read_incidents(path: str) -> pd.DataFrame:
    # Read CSV as text (try UTF-8, fallback to latin-1 if needed);
    # a year-only date column must not turn into integers
    try:
        df = pd.read_csv(path, dtype=str)
    except UnicodeDecodeError:
        df = pd.read_csv(path, dtype=str, encoding="latin1")

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in RAW_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}. Found: {df.columns.tolist()}")

    return df[list(RAW_COLUMNS)].rename(columns=RAW_COLUMNS)


def to_records(df: pd.DataFrame) -> list[IncidentRecord]:
    df = df.reindex(columns=CANONICAL)
    return [
        IncidentRecord(
            event_date=None if pd.isna(date) else date,
            fatalities=None if pd.isna(fatal) else fatal,
            manufacturer="" if pd.isna(make) else str(make),
        )
        for date, fatal, make in df.itertuples(index=False, name=None)
    ]


def load_and_clean(path: str = "aircraft_incidents.csv",
                   out_csv: Optional[str] = None) -> pd.DataFrame:
    df = clean_frame(read_incidents(path))
    if out_csv:
        df.to_csv(out_csv, index=False)
    return df


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    cleaned = load_and_clean("aircraft_incidents.csv", out_csv="incidents_clean.csv")
    print(cleaned.head(10))
    if len(cleaned):
        print(f"\nRows kept: {len(cleaned)} | Years: {cleaned['year'].min()}–{cleaned['year'].max()}"
              f" | Manufacturers: {cleaned['manufacturer'].nunique()}")
    else:
        print("\nNo rows with a usable event date.")
