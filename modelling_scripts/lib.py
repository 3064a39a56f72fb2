"""
 Shared migration matrix utilities.

 Functions:
 - resolve_columns
 - build_matrix
 - summary_qc
 - validate_migration_matrix

 Notes: This module performs no filesystem I/O; callers are responsible for reading/writing.
 """
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import numpy as np
import pandas as pd

log = logging.getLogger(__name__)

ROLE_STATE_START = "state_start"
ROLE_STATE_END = "state_end"
ROLE_METRIC = "metric"

NOT_FOUND = "not_found"
MULTIPLE_MATCHES = "multiple_matches"

Notify = Callable[[str], None]


class AmbiguousColumnError(ValueError):
    """Raised when a column role cannot be inferred to exactly one column."""

    def __init__(self, role: str, kind: str, message: str):
        super().__init__(message)
        self.role = role
        self.kind = kind


class MatrixShapeError(ValueError):
    """Raised when the input row count does not fill the label grid exactly."""


def is_state_dtype(dtype) -> bool:
    return isinstance(dtype, pd.CategoricalDtype)


def is_metric_dtype(dtype) -> bool:
    return pd.api.types.is_numeric_dtype(dtype) and not pd.api.types.is_bool_dtype(dtype)


@dataclass(frozen=True)
class ColumnRoleResolver:
    """
    Strategy that picks the single column of a table playing a given role.

    Parameters
    ----------
    role : str
        Role name, used in notices and errors.
    dtype_filter : Callable
        Predicate over a column dtype.
    name_contains : Optional[str]
        Case-sensitive substring the column name must contain, if any.
    criteria : str
        Human-readable description of the filter for messages.
    """
    role: str
    dtype_filter: Callable[[object], bool]
    name_contains: Optional[str]
    criteria: str

    def candidates(self, table: pd.DataFrame) -> List[str]:
        cols = []
        for col, dtype in table.dtypes.items():
            if not self.dtype_filter(dtype):
                continue
            if self.name_contains is not None and self.name_contains not in str(col):
                continue
            cols.append(col)
        return cols

    def resolve(self, table: pd.DataFrame, notify: Optional[Notify] = None) -> str:
        notify = notify or log.info
        found = self.candidates(table)
        if len(found) > 1:
            raise AmbiguousColumnError(
                self.role, MULTIPLE_MATCHES,
                f"Multiple columns {self.criteria} were found for '{self.role}': {found}",
            )
        if not found:
            raise AmbiguousColumnError(
                self.role, NOT_FOUND,
                f"No columns {self.criteria} were found for '{self.role}'",
            )
        col = found[0]
        notify(f"Using '{col}' as the '{self.role}' column variable")
        return col


STATE_START_RESOLVER = ColumnRoleResolver(
    ROLE_STATE_START, is_state_dtype, "start",
    "of type `category` with the phrase 'start' in the column name",
)
STATE_END_RESOLVER = ColumnRoleResolver(
    ROLE_STATE_END, is_state_dtype, "end",
    "of type `category` with the phrase 'end' in the column name",
)
METRIC_RESOLVER = ColumnRoleResolver(
    ROLE_METRIC, is_metric_dtype, None,
    "of numeric type",
)


def resolve_columns(table: pd.DataFrame,
                    state_start: Optional[str] = None,
                    state_end: Optional[str] = None,
                    metric: Optional[str] = None,
                    notify: Optional[Notify] = None) -> Dict[str, str]:
    """Map each role to a column; supplied names are trusted as-is, the rest are inferred."""
    if state_start is None:
        state_start = STATE_START_RESOLVER.resolve(table, notify)
    if state_end is None:
        state_end = STATE_END_RESOLVER.resolve(table, notify)
    if metric is None:
        metric = METRIC_RESOLVER.resolve(table, notify)
    return {ROLE_STATE_START: state_start, ROLE_STATE_END: state_end, ROLE_METRIC: metric}


def sorted_states(values: pd.Series) -> List:
    # category columns sort by level order, everything else by value
    states = values.dropna().drop_duplicates().sort_values(kind="mergesort")
    return list(states)


def metric_values(values: pd.Series) -> np.ndarray:
    vals = values.to_numpy(dtype=float, na_value=np.nan, copy=True)
    vals[np.isinf(vals)] = np.nan
    return vals


def build_matrix(table: pd.DataFrame,
                 state_start: Optional[str] = None,
                 state_end: Optional[str] = None,
                 metric: Optional[str] = None,
                 notify: Optional[Notify] = None) -> pd.DataFrame:
    """
    Build a migration (transition) matrix from a summarized table.

    Parameters
    ----------
    table : pd.DataFrame
        One row per (start state, end state) pair plus a metric column, e.g. the
        output of ``cleaning_scripts.summarize.summarize_migration``.
    state_start, state_end, metric : Optional[str]
        Column names for each role. Omitted roles are inferred: the single
        `category` column containing "start" / "end" in its name, and the single
        numeric column. Supplied names are not checked against those rules.
    notify : Optional[Callable[[str], None]]
        Receives one notice per inferred role. Defaults to logging at INFO.

    Returns
    -------
    pd.DataFrame
        Rows are the sorted distinct start states, columns the sorted distinct
        end states, cells the metric. Infinite metric values become NaN.

    Notes
    -----
    Cells are filled row-major straight from the table's row order; the (start, end)
    pair of each row is NOT looked up. The table must therefore hold exactly one row
    per pair, sorted by start state then end state in label order. Use
    ``validate_migration_matrix`` to check a result against its table.
    """
    roles = resolve_columns(table, state_start, state_end, metric, notify)

    row_names = sorted_states(table[roles[ROLE_STATE_START]])
    col_names = sorted_states(table[roles[ROLE_STATE_END]])
    vals = metric_values(table[roles[ROLE_METRIC]])

    n_cells = len(row_names) * len(col_names)
    if len(vals) != n_cells:
        raise MatrixShapeError(
            f"Input has {len(vals)} rows but the {len(row_names)} x {len(col_names)} "
            f"state grid needs {n_cells}; expected one row per (start, end) pair"
        )

    return pd.DataFrame(
        vals.reshape(len(row_names), len(col_names)),
        index=pd.Index(row_names, name=roles[ROLE_STATE_START]),
        columns=pd.Index(col_names, name=roles[ROLE_STATE_END]),
    )


def summary_qc(table: pd.DataFrame, state_start: str, state_end: str, metric: str) -> dict:
    """Describe how well a summary table fits the row-major layout build_matrix expects."""
    starts = sorted_states(table[state_start])
    ends = sorted_states(table[state_end])
    pairs = table[[state_start, state_end]]
    expected = pd.MultiIndex.from_product([starts, ends])
    observed = pd.MultiIndex.from_frame(pairs.astype(object))
    vals = table[metric].to_numpy(dtype=float, na_value=np.nan)
    return {
        "rows": int(len(table)),
        "start_states": [str(s) for s in starts],
        "end_states": [str(s) for s in ends],
        "unique_pairs_ok": bool(not pairs.duplicated().any()),
        "complete_grid_ok": bool(len(table) == len(expected) and set(observed) == set(expected)),
        "sorted_order_ok": bool(observed.equals(expected)),
        "metric_total": float(np.nansum(np.where(np.isinf(vals), np.nan, vals))),
        "metric_missing": int(np.isnan(vals).sum()),
        "metric_infinite": int(np.isinf(vals).sum()),
    }


def validate_migration_matrix(table: pd.DataFrame, matrix: pd.DataFrame,
                              state_start: str, state_end: str, metric: str,
                              max_examples: int = 5) -> List[str]:
    """
    Compare a built matrix against the table it came from, cell by (start, end) key.

    Parameters
    ----------
    table : pd.DataFrame
        Summary table with the three role columns.
    matrix : pd.DataFrame
        Matrix indexed by start state with end-state columns. Labels are compared
        as strings so a matrix read back from CSV can be checked.
    max_examples : int
        How many mismatching pairs to quote in the issue text.

    Returns
    -------
    List[str]
        Issues found; empty when every cell matches its keyed table value.
    """
    issues = []
    n_cells = matrix.shape[0] * matrix.shape[1]
    if n_cells != len(table):
        issues.append(f"Matrix has {n_cells} cells but the table has {len(table)} rows")

    pairs = table[[state_start, state_end]]
    n_dupes = int(pairs.duplicated().sum())
    if n_dupes:
        issues.append(f"{n_dupes} duplicated (start, end) pairs in table")

    rows = {str(r): i for i, r in enumerate(matrix.index)}
    cols = {str(c): j for j, c in enumerate(matrix.columns)}
    cells = matrix.to_numpy(dtype=float, na_value=np.nan)
    vals = metric_values(table[metric])

    missing_labels = 0
    mismatched = []
    for (start, end), val in zip(pairs.itertuples(index=False, name=None), vals):
        if pd.isna(start) or pd.isna(end):
            continue
        i = rows.get(str(start))
        j = cols.get(str(end))
        if i is None or j is None:
            missing_labels += 1
            continue
        cell = cells[i, j]
        if np.isnan(val) and np.isnan(cell):
            continue
        if not np.isclose(cell, val):
            mismatched.append((str(start), str(end)))

    if missing_labels:
        issues.append(f"{missing_labels} table rows have states missing from the matrix axes")
    if mismatched:
        examples = ", ".join(f"{s}->{e}" for s, e in mismatched[:max_examples])
        issues.append(
            f"{len(mismatched)} cells do not match their (start, end) table value "
            f"(e.g. {examples}); table rows are likely not sorted to match the label axes"
        )
    return issues
