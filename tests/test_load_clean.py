from datetime import datetime

import pandas as pd
import pytest

from load_clean import (
    IncidentRecord,
    clean_frame,
    load_and_clean,
    parse_fatalities,
    parse_year,
    read_incidents,
    to_records,
)


@pytest.mark.parametrize("raw, expected", [
    ("2000-01-01", 2000),
    ("03/15/2016", 2016),
    ("15 Jan 2009", 2009),
    ("2012", 2012),
    (datetime(1999, 12, 31, 23, 0), 1999),
    (pd.Timestamp("2005-06-01"), 2005),
    # timezone-aware values keep the year written in the record
    ("2000-01-01T00:30:00+05:00", 2000),
    ("1999-12-31T23:30:00-08:00", 1999),
    (pd.Timestamp("2000-01-01 00:30", tz="Asia/Karachi"), 2000),
])
def test_parse_year_formats(raw, expected: int) -> None:
    assert parse_year(raw) == expected


# bare numbers are rejected rather than read as epoch nanoseconds
@pytest.mark.parametrize("raw", ["", "not a date", None, float("nan"), 2012, 2012.0])
def test_parse_year_unparseable_returns_none(raw) -> None:
    assert parse_year(raw) is None


@pytest.mark.parametrize("raw, expected", [
    (3, 3),
    ("4", 4),
    ("2.9", 2),
    (None, 0),
    ("", 0),
    ("n/a", 0),
    (float("nan"), 0),
    (float("inf"), 0),
    (-5, 0),
])
def test_parse_fatalities(raw, expected: int) -> None:
    assert parse_fatalities(raw) == expected


def _raw():
    return pd.DataFrame({
        "event_date": ["2001-05-01", "garbage", "2002-07-04", None],
        "fatalities": ["2", "7", None, "1"],
        "manufacturer": ["Boeing", "Boeing", None, "Cessna"],
    })


def test_clean_frame_drops_bad_dates_and_defaults() -> None:
    out = clean_frame(_raw())
    assert list(out.columns) == ["manufacturer", "year", "fatalities"]
    assert out["year"].tolist() == [2001, 2002]
    assert out["fatalities"].tolist() == [2, 0]
    assert out["manufacturer"].tolist() == ["Boeing", ""]


def test_clean_frame_keeps_case_variants() -> None:
    df = pd.DataFrame({
        "event_date": ["2001-01-01", "2001-01-02"],
        "fatalities": [1, 1],
        "manufacturer": ["BOEING", "Boeing"],
    })
    assert clean_frame(df)["manufacturer"].tolist() == ["BOEING", "Boeing"]


def test_clean_frame_missing_fatality_column() -> None:
    df = pd.DataFrame({"event_date": ["2010-01-01"], "manufacturer": ["Airbus"]})
    assert clean_frame(df)["fatalities"].tolist() == [0]


def test_clean_frame_empty() -> None:
    out = clean_frame(pd.DataFrame())
    assert out.empty
    assert list(out.columns) == ["manufacturer", "year", "fatalities"]


def _write_csv(path, header="Event_Date,Total_Fatal_Injuries,Make,Model"):
    path.write_text(
        f"{header}\n"
        "2010-03-01,2,Boeing,737\n"
        "2010-09-12,,Boeing,747\n"
        "bad,5,Airbus,A320\n",
        encoding="utf-8",
    )
    return path


def test_read_incidents_renames_columns(tmp_path) -> None:
    df = read_incidents(str(_write_csv(tmp_path / "incidents.csv")))
    assert list(df.columns) == ["event_date", "fatalities", "manufacturer"]
    assert len(df) == 3


def test_read_incidents_strips_header_whitespace(tmp_path) -> None:
    path = _write_csv(tmp_path / "incidents.csv",
                      header=" Event_Date , Total_Fatal_Injuries ,Make,Model")
    assert len(read_incidents(str(path))) == 3


def test_read_incidents_missing_column_raises(tmp_path) -> None:
    path = tmp_path / "incidents.csv"
    path.write_text("Event_Date,Make\n2010-01-01,Boeing\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Total_Fatal_Injuries"):
        read_incidents(str(path))


def test_load_and_clean_writes_output(tmp_path) -> None:
    out_csv = tmp_path / "clean.csv"
    df = load_and_clean(str(_write_csv(tmp_path / "incidents.csv")), out_csv=str(out_csv))
    assert df.to_dict("records") == [
        {"manufacturer": "Boeing", "year": 2010, "fatalities": 2},
        {"manufacturer": "Boeing", "year": 2010, "fatalities": 0},
    ]
    assert out_csv.exists()


def test_to_records(tmp_path) -> None:
    records = to_records(read_incidents(str(_write_csv(tmp_path / "incidents.csv"))))
    assert len(records) == 3
    assert records[0] == IncidentRecord("2010-03-01", "2", "Boeing")
    assert records[1].fatalities is None


def test_read_incidents_keeps_year_only_dates(tmp_path) -> None:
    path = tmp_path / "incidents.csv"
    path.write_text(
        "Event_Date,Total_Fatal_Injuries,Make\n"
        "2012,3,Boeing\n"
        "2013,1,Boeing\n",
        encoding="utf-8",
    )
    df = read_incidents(str(path))
    assert df["event_date"].tolist() == ["2012", "2013"]
    assert clean_frame(df).to_dict("records") == [
        {"manufacturer": "Boeing", "year": 2012, "fatalities": 3},
        {"manufacturer": "Boeing", "year": 2013, "fatalities": 1},
    ]
