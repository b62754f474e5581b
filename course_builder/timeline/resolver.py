from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ..config import TIME_MODES
from ..errors import InvalidModeError, OrderingError

logger = logging.getLogger(__name__)


def format_hms(seconds: int) -> str:
    seconds = int(seconds)
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


def resolve_times(samples: pd.DataFrame, time_mode: str) -> pd.DataFrame:
    """Place every sample on one monotonic timeline.

    - "time": time_s is already wall-clock seconds; it must never decrease.
    - "duration": time_s is how long the step lasts. Each sample starts where
      the running clock stood before its own duration is added.
    """
    if time_mode not in TIME_MODES:
        raise InvalidModeError(time_mode, TIME_MODES)

    df = samples.copy()
    if df.empty:
        return df

    if time_mode == "duration":
        durations = df["time_s"].to_numpy(dtype=np.int64)
        # Exclusive cumulative sum: the first step starts at zero
        starts = np.concatenate(([0], np.cumsum(durations)[:-1]))
        df["time_s"] = starts.astype(np.int64)
        logger.debug("Resolved %d durations to a %ss timeline", len(df), int(durations.sum()))
        return df

    times = df["time_s"].to_numpy(dtype=np.int64)
    running_max = np.maximum.accumulate(times)
    backwards = np.flatnonzero(times[1:] < running_max[:-1])
    if backwards.size:
        i = int(backwards[0]) + 1
        raise OrderingError(
            line=int(df["line"].iloc[i]),
            got=format_hms(times[i]),
            expected_minimum=format_hms(running_max[i - 1]),
        )
    return df
