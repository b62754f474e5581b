from __future__ import annotations

import numpy as np
import pandas as pd


def round_half_up(values):
    """Nearest integer for non-negative values, ties upward (np.rint and round() go to even)."""
    return np.floor(np.asarray(values, dtype=float) + 0.5)


def transform_samples(
    samples: pd.DataFrame,
    ftp_watts: float,
    acceleration: float = 1.0,
    scale: float = 1.0,
) -> pd.DataFrame:
    """Compress the timeline and express power as a fraction of FTP.

    time_s becomes round(time_s / acceleration) in whole seconds; power becomes
    round(power * scale / ftp * 100) / 100, NaN where the row had no power.
    """
    df = samples.copy()
    if df.empty:
        df["power"] = df["power"].astype(float)
        return df

    df["time_s"] = round_half_up(df["time_s"].to_numpy(dtype=float) / float(acceleration)).astype(np.int64)

    watts = df["power"].astype("Float64").to_numpy(dtype=float, na_value=np.nan)
    pct = round_half_up(watts * float(scale) / float(ftp_watts) * 100.0)
    df["power"] = pct / 100.0
    return df
