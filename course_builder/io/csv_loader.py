from __future__ import annotations

import logging
import re
from typing import List, Tuple

import numpy as np
import pandas as pd

from ..config import TIME_FORMAT
from ..errors import InputReadError, RowParseError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["time", "power"]
OPTIONAL_COLUMNS = ["text"]

_PARSER_LINE_RE = re.compile(r"line (\d+)")
_POWER_RE = r"\d+"


def read_course_csv(file_path: str) -> pd.DataFrame:
    """Read the CSV trace into a DataFrame of raw strings.

    Columns: line (1-based data row), time, power, text. Every value is kept as
    the literal cell text; blank cells stay blank.
    """
    try:
        raw = pd.read_csv(
            file_path,
            header=None,
            dtype=str,
            keep_default_na=False,
            engine="python",
        )
    except pd.errors.EmptyDataError:
        raise RowParseError(0, "missing header row")
    except pd.errors.ParserError as e:
        raise RowParseError(_data_line_from_parser_error(e), str(e).strip())
    except UnicodeDecodeError as e:
        raise InputReadError(str(file_path), str(e))
    except OSError as e:
        raise InputReadError(str(file_path), e.strerror or str(e))

    header = [str(c).strip() for c in raw.iloc[0].tolist()]
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        raise RowParseError(0, f"header is missing column(s): {', '.join(missing)}")

    df = raw.iloc[1:].reset_index(drop=True)
    df.columns = header
    width = len(header)
    df.insert(0, "line", np.arange(1, len(df) + 1))

    # Short rows come back padded with NaN
    short = df[header].isna().any(axis=1)
    if short.any():
        row = df[short].iloc[0]
        present = int(row[header].notna().sum())
        raise RowParseError(
            int(row["line"]),
            f"found record with {present} fields, but the header has {width} fields",
        )

    for col in OPTIONAL_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    logger.info("Read %d rows from %s", len(df), file_path)
    return df[["line", "time", "power", "text"]]


def _data_line_from_parser_error(err: Exception) -> int:
    # pandas reports physical lines; the header is physical line 1
    m = _PARSER_LINE_RE.search(str(err))
    if not m:
        return 0
    return max(0, int(m.group(1)) - 1)


def _empty_samples() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "line": pd.Series([], dtype="int64"),
            "time_s": pd.Series([], dtype="int64"),
            "power": pd.Series([], dtype="Int64"),
            "text": pd.Series([], dtype=object),
        }
    )


def parse_records(raw: pd.DataFrame) -> pd.DataFrame:
    """Turn raw string rows into typed samples.

    Output columns: line, time_s (seconds since midnight, or a duration in
    duration mode), power (nullable Int64 watts), text (str or None).
    Raises RowParseError for the first malformed row.
    """
    if raw.empty:
        return _empty_samples()

    raw = raw.reset_index(drop=True)
    problems: List[Tuple[int, str]] = []

    times = raw["time"].str.strip()
    parsed = pd.to_datetime(times, format=TIME_FORMAT, errors="coerce")
    bad_time = parsed.isna()
    if bad_time.any():
        i = int(np.argmax(bad_time.to_numpy()))
        problems.append((int(raw["line"].iloc[i]), f"invalid time '{raw['time'].iloc[i]}', expected HH:MM:SS"))

    power_str = raw["power"].str.strip()
    has_power = power_str != ""
    bad_power = has_power & ~power_str.str.fullmatch(_POWER_RE)
    if bad_power.any():
        i = int(np.argmax(bad_power.to_numpy()))
        problems.append(
            (int(raw["line"].iloc[i]), f"invalid power value '{raw['power'].iloc[i]}', expected a non-negative integer")
        )

    if problems:
        line, detail = min(problems)
        raise RowParseError(line, detail)

    time_s = parsed.dt.hour * 3600 + parsed.dt.minute * 60 + parsed.dt.second
    power = pd.to_numeric(power_str.where(has_power)).astype("Int64")
    text = raw["text"].map(lambda s: s if s != "" else None).astype(object)

    return pd.DataFrame(
        {
            "line": raw["line"].astype("int64"),
            "time_s": time_s.astype("int64"),
            "power": power,
            "text": text,
        }
    )


def load_samples(file_path: str) -> pd.DataFrame:
    return parse_records(read_course_csv(file_path))
