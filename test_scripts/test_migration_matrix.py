"""Unit tests for building migration matrices from summarized tables."""
import logging
import numpy as np
import pandas as pd
import pytest
from modelling_scripts.lib import (
    build_matrix,
    sorted_states,
    MatrixShapeError,
)


def make_summary(starts, ends, values, **extra):
    data = {
        "rating_start": pd.Categorical(starts),
        "rating_end": pd.Categorical(ends),
        "balance": values,
    }
    data.update(extra)
    return pd.DataFrame(data)


def test_build_matrix_infers_columns():
    df = make_summary(["A", "A", "B", "B"], ["A", "B", "A", "B"], [10.0, 5.0, 1.0, 20.0])
    notices = []
    mat = build_matrix(df, notify=notices.append)

    assert list(mat.index) == ["A", "B"]
    assert list(mat.columns) == ["A", "B"]
    assert mat.index.name == "rating_start"
    assert mat.columns.name == "rating_end"
    assert mat.loc["A", "B"] == 5.0
    assert mat.loc["B", "A"] == 1.0
    # One notice per inferred role, naming the column
    assert notices == [
        "Using 'rating_start' as the 'state_start' column variable",
        "Using 'rating_end' as the 'state_end' column variable",
        "Using 'balance' as the 'metric' column variable",
    ]


def test_build_matrix_default_notices_go_to_log(caplog):
    df = make_summary(["A", "A", "B", "B"], ["A", "B", "A", "B"], [1, 2, 3, 4])
    with caplog.at_level(logging.INFO, logger="modelling_scripts.lib"):
        build_matrix(df)
    assert "Using 'rating_start' as the 'state_start' column variable" in caplog.text
    assert "Using 'balance' as the 'metric' column variable" in caplog.text


def test_explicit_columns_skip_notices():
    df = make_summary(["A", "B"], ["C", "C"], [1.0, 2.0])
    notices = []
    mat = build_matrix(df, "rating_start", "rating_end", "balance", notify=notices.append)
    assert notices == []
    assert mat.shape == (2, 1)


def test_explicit_metric_with_several_numeric_columns():
    df = make_summary(["A", "A", "B", "B"], ["A", "B", "A", "B"], [1.0, 2.0, 3.0, 4.0],
                      count=[1, 1, 2, 2])
    mat = build_matrix(df, metric="count", notify=lambda msg: None)
    assert mat.to_numpy().tolist() == [[1.0, 1.0], [2.0, 2.0]]


def test_explicit_columns_need_not_be_categorical():
    # Plain string columns would never be inferred, but supplied names are trusted
    df = pd.DataFrame({
        "from": ["A", "A", "B", "B"],
        "to": ["A", "B", "A", "B"],
        "amt": [1, 2, 3, 4],
        "other_amt": [9, 9, 9, 9],
    })
    mat = build_matrix(df, state_start="from", state_end="to", metric="amt")
    assert mat.loc["B", "A"] == 3


def test_label_ordering_ignores_row_order():
    assert sorted_states(pd.Series(["B", "A", "A"])) == ["A", "B"]
    assert sorted_states(pd.Series(["C", "B"])) == ["B", "C"]

    df = make_summary(["B", "B", "A", "A"], ["C", "B", "C", "B"], [1.0, 2.0, 3.0, 4.0])
    mat = build_matrix(df, notify=lambda msg: None)
    assert list(mat.index) == ["A", "B"]
    assert list(mat.columns) == ["B", "C"]


def test_category_level_order_drives_labels():
    scale = ["AAA", "AA", "A"]
    df = pd.DataFrame({
        "rating_start": pd.Categorical(["AAA", "AAA", "AA", "AA"], categories=scale, ordered=True),
        "rating_end": pd.Categorical(["AAA", "A", "AAA", "A"], categories=scale, ordered=True),
        "balance": [1.0, 2.0, 3.0, 4.0],
    })
    mat = build_matrix(df, notify=lambda msg: None)
    # Unobserved levels are not labels; observed ones keep the rating scale order
    assert list(mat.index) == ["AAA", "AA"]
    assert list(mat.columns) == ["AAA", "A"]


def test_missing_states_are_not_labels():
    assert sorted_states(pd.Series(["B", None, "A", np.nan])) == ["A", "B"]


def test_infinite_metric_values_become_nan():
    df = make_summary(["A", "A", "B", "B"], ["A", "B", "A", "B"], [1.0, np.inf, np.nan, -np.inf])
    mat = build_matrix(df, notify=lambda msg: None)

    assert mat.loc["A", "A"] == 1.0
    assert np.isnan(mat.loc["A", "B"])
    assert np.isnan(mat.loc["B", "A"])
    assert np.isnan(mat.loc["B", "B"])
    # Input left untouched
    assert np.isinf(df["balance"].iloc[1])


def test_fill_is_row_major_in_input_order():
    df = make_summary(["A", "A", "B", "B"], ["A", "B", "A", "B"], [1, 2, 3, 4])
    mat = build_matrix(df, notify=lambda msg: None)
    assert mat.to_numpy().tolist() == [[1.0, 2.0], [3.0, 4.0]]


def test_shape_matches_input_rows():
    starts = ["A"] * 3 + ["B"] * 3
    ends = ["X", "Y", "Z"] * 2
    df = make_summary(starts, ends, np.arange(6, dtype=float))
    mat = build_matrix(df, notify=lambda msg: None)
    assert mat.shape == (2, 3)
    assert mat.size == len(df)


def test_row_count_mismatch_raises():
    # Three rows cannot fill a 2 x 2 grid
    df = make_summary(["B", "A", "A"], ["C", "B", "C"], [1.0, 2.0, 3.0])
    with pytest.raises(MatrixShapeError, match="3 rows"):
        build_matrix(df, notify=lambda msg: None)
