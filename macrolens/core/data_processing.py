# Calendar alignment for series sampled at different frequencies

import numpy as np
import pandas as pd

from analysis.models import AlignedPoint, DataPoint

# Fewer points than this is not enough evidence to call a series coarse
MIN_POINTS_FOR_FREQUENCY = 5
# Average spacing above this many days means monthly (or slower) data
COARSE_GAP_DAYS = 20


def empty_series() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Date": pd.Series(dtype="datetime64[ns]"),
            "Value": pd.Series(dtype=float),
        }
    )


def empty_aligned() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Date": pd.Series(dtype="datetime64[ns]"),
            "X": pd.Series(dtype=float),
            "Y": pd.Series(dtype=float),
        }
    )


def to_frame(points: list[DataPoint] | list[dict]) -> pd.DataFrame:
    """Convert a list of observations into a Date/Value dataframe."""
    if not points:
        return empty_series()

    records = [p.model_dump() if isinstance(p, DataPoint) else p for p in points]
    df = pd.DataFrame(records).rename(columns={"date": "Date", "value": "Value"})
    return transform_data_base(df)


def to_points(df: pd.DataFrame) -> list[DataPoint]:
    if df.empty:
        return []
    return [
        DataPoint(date=date.strftime("%Y-%m-%d"), value=float(value))
        for date, value in zip(df["Date"], df["Value"])
    ]


def to_aligned_points(aligned: pd.DataFrame) -> list[AlignedPoint]:
    if aligned.empty:
        return []
    return [
        AlignedPoint(date=date.strftime("%Y-%m-%d"), x=float(x), y=float(y))
        for date, x, y in zip(aligned["Date"], aligned["X"], aligned["Y"])
    ]


def transform_data_base(df: pd.DataFrame) -> pd.DataFrame:
    """Sort by date, drop duplicate dates (last one wins) and non-finite values."""
    if df.empty:
        return empty_series()

    df = df[["Date", "Value"]].copy()
    # Floor the date to the day so that there is no time component
    df["Date"] = pd.to_datetime(df["Date"]).dt.normalize().astype("datetime64[ns]")
    df["Value"] = pd.to_numeric(df["Value"], errors="coerce").astype(float)
    df = df[np.isfinite(df["Value"])]

    df = df.sort_values("Date", kind="stable")
    df = df.drop_duplicates(subset="Date", keep="last")
    return df.reset_index(drop=True)


def is_coarse(df: pd.DataFrame) -> bool:
    df = transform_data_base(df)
    n = len(df.index)
    if n < MIN_POINTS_FOR_FREQUENCY:
        return False

    average_gap = (df["Date"].iloc[-1] - df["Date"].iloc[0]) / (n - 1)
    return average_gap > pd.Timedelta(days=COARSE_GAP_DAYS)


def forward_fill(coarse: pd.DataFrame, reference: pd.DataFrame) -> pd.DataFrame:
    """
    Carry the latest coarse observation onto every date of the reference calendar.

    Only observations dated on or before a reference date are used, and
    reference dates before the first coarse observation are dropped.
    """
    coarse = transform_data_base(coarse)
    reference = transform_data_base(reference)
    if coarse.empty or reference.empty:
        return empty_series()

    filled = pd.merge_asof(
        reference[["Date"]],
        coarse,
        on="Date",
        direction="backward",
        allow_exact_matches=True,
    )
    filled = filled.dropna(subset=["Value"])
    return filled.reset_index(drop=True)


def align_series(df_a: pd.DataFrame, df_b: pd.DataFrame) -> pd.DataFrame:
    """Inner join two series on date, forward filling whichever side is coarse."""
    df_a = transform_data_base(df_a)
    df_b = transform_data_base(df_b)
    if df_a.empty or df_b.empty:
        return empty_aligned()

    a_coarse = is_coarse(df_a)
    b_coarse = is_coarse(df_b)
    if a_coarse and not b_coarse:
        df_a = forward_fill(df_a, df_b)
    elif b_coarse and not a_coarse:
        df_b = forward_fill(df_b, df_a)

    merged = pd.merge(
        df_a.rename(columns={"Value": "X"}),
        df_b.rename(columns={"Value": "Y"}),
        on="Date",
        how="inner",
    )
    if merged.empty:
        return empty_aligned()

    return merged.sort_values("Date").reset_index(drop=True)


def spread(df_a: pd.DataFrame, df_b: pd.DataFrame) -> pd.DataFrame:
    """Difference a - b over the dates both series share."""
    aligned = align_series(df_a, df_b)
    return pd.DataFrame({"Date": aligned["Date"], "Value": aligned["X"] - aligned["Y"]})
