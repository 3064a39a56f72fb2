"""
Summarize two-period credit observations into one row per (start state, end state) pair.

Functions:
- summarize_migration
- make_mock_credit

Notes: No filesystem I/O here; see 01_summarize_migration for the CLI wrapper.
"""
import logging
from typing import List, Optional

import numpy as np
import pandas as pd

log = logging.getLogger(__name__)

RATING_SCALE = ["AAA", "AA", "A", "BBB", "BB", "B", "CCC", "D"]
MOCK_DATES = ["2020-06-30", "2021-06-30"]


def _state_dtype(states: pd.Series, state_order: Optional[List[str]],
                 fill_state: Optional[str]) -> pd.CategoricalDtype:
    if state_order is not None:
        categories = list(state_order)
        unknown = sorted(set(states.dropna().astype(str)) - set(categories))
        if unknown:
            raise ValueError(f"States not in state order: {unknown}")
        ordered = True
    elif isinstance(states.dtype, pd.CategoricalDtype):
        categories = list(states.cat.categories)
        ordered = states.cat.ordered
    else:
        categories = sorted(states.dropna().unique())
        ordered = False
    if fill_state is not None and fill_state not in categories:
        categories.append(fill_state)
    return pd.CategoricalDtype(categories, ordered=ordered)


def summarize_migration(data: pd.DataFrame, id_col: str, time_col: str, state_col: str,
                        metric_col: Optional[str] = None, percent: bool = True,
                        fill_state: Optional[str] = None,
                        state_order: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Pivot ``id, time, state[, metric]`` observations at two points in time into a
    migration summary.

    Parameters
    ----------
    data : pd.DataFrame
        One row per id per time point.
    id_col, time_col, state_col : str
        Column names for the entity id, the observation time and the credit state.
    metric_col : Optional[str]
        Column to aggregate, taken at the starting time point. When omitted each
        id counts once and the output column is named ``count``.
    percent : bool
        Express each cell as a share of its starting state's total.
    fill_state : Optional[str]
        State assigned to ids observed at only one time point. When omitted those
        ids are dropped.
    state_order : Optional[List[str]]
        Explicit (ordered) category order for the state, e.g. a rating scale.

    Returns
    -------
    pd.DataFrame
        Columns ``<state>_start``, ``<state>_end`` (category dtype, same categories)
        and the metric. Every pair of categories appears exactly once, sorted by
        start then end category order, which is the layout build_matrix expects.
    """
    required = [id_col, time_col, state_col] + ([metric_col] if metric_col else [])
    missing = [c for c in required if c not in data.columns]
    if missing:
        raise ValueError(f"Required columns missing: {missing}")

    times = sorted(data[time_col].dropna().unique())
    if len(times) != 2:
        raise ValueError(f"Expected exactly 2 distinct values in '{time_col}', found {len(times)}")
    t_start, t_end = times

    dtype = _state_dtype(data[state_col], state_order, fill_state)
    value_col = metric_col or "count"
    df = data[required].copy()
    states = df[state_col]
    if state_order is not None:
        states = states.astype(str).where(states.notna())
    df[state_col] = states.astype(dtype)
    if metric_col is None:
        df[value_col] = 1

    dupes = df[[id_col, time_col]].duplicated()
    if dupes.any():
        raise ValueError(f"{int(dupes.sum())} ids have more than one observation at a single time point")

    cols = [id_col, state_col, value_col]
    start = df.loc[df[time_col] == t_start, cols]
    end = df.loc[df[time_col] == t_end, cols]
    merged = start.merge(end, on=id_col, how="outer", suffixes=("_start", "_end"), indicator=True)

    start_col, end_col = f"{state_col}_start", f"{state_col}_end"
    merged[start_col] = merged[start_col].astype(dtype)
    merged[end_col] = merged[end_col].astype(dtype)
    merged[value_col] = merged[f"{value_col}_start"].where(
        merged["_merge"] != "right_only", merged[f"{value_col}_end"]
    )

    unmatched = merged[start_col].isna() | merged[end_col].isna()
    if fill_state is not None:
        merged[start_col] = merged[start_col].fillna(fill_state)
        merged[end_col] = merged[end_col].fillna(fill_state)
        if unmatched.any():
            log.info(f"Filled state '{fill_state}' for {int(unmatched.sum())} ids observed at one time point only")
    elif unmatched.any():
        log.warning(f"Dropping {int(unmatched.sum())} ids without a state at both {t_start} and {t_end}")
        merged = merged[~unmatched]

    summary = (
        merged.groupby([start_col, end_col], observed=False)[value_col].sum().reset_index()
    )

    if percent:
        totals = summary.groupby(start_col, observed=False)[value_col].transform("sum")
        with np.errstate(invalid="ignore", divide="ignore"):
            summary[value_col] = summary[value_col].astype(float) / totals.astype(float)

    log.info(f"Summarized {len(merged):,} ids into {len(summary):,} ({start_col}, {end_col}) pairs")
    return summary


def make_mock_credit(n_customers: int = 500, seed: int = 42) -> pd.DataFrame:
    """Mock ``customer_id, date, risk_rating, principal_balance`` observations at two month-ends."""
    rng = np.random.default_rng(seed)
    ids = [f"C{i:05d}" for i in range(1, n_customers + 1)]
    n_states = len(RATING_SCALE)

    # nobody starts in default; most ratings stay put, downgrades beat upgrades
    start_idx = rng.integers(0, n_states - 1, size=n_customers)
    move = rng.choice([-1, 0, 1, 2], p=[0.10, 0.70, 0.15, 0.05], size=n_customers)
    end_idx = np.clip(start_idx + move, 0, n_states - 1)

    balance = rng.lognormal(mean=np.log(250_000), sigma=0.6, size=n_customers).round(2)
    amortized = (balance * rng.uniform(0.85, 1.0, size=n_customers)).round(2)

    scale = np.array(RATING_SCALE)
    frame = pd.concat([
        pd.DataFrame({"customer_id": ids, "date": pd.Timestamp(MOCK_DATES[0]),
                      "risk_rating": scale[start_idx], "principal_balance": balance}),
        pd.DataFrame({"customer_id": ids, "date": pd.Timestamp(MOCK_DATES[1]),
                      "risk_rating": scale[end_idx], "principal_balance": amortized}),
    ], ignore_index=True)
    frame["risk_rating"] = pd.Categorical(frame["risk_rating"], categories=RATING_SCALE, ordered=True)
    return frame
