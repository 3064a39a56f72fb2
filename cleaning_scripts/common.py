import os
import json
import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd


def project_root() -> Path:
    # scripts/ directory is under project root
    return Path(__file__).resolve().parents[1]


def get_paths():
    root = project_root()
    data = root / "data"
    clean = root / "data_clean"
    reports = root / "reports"
    return root, data, clean, reports


def ensure_dirs():
    _, _, clean, reports = get_paths()
    clean.mkdir(parents=True, exist_ok=True)
    reports.mkdir(parents=True, exist_ok=True)


DEFAULT_LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
DEFAULT_FILL_STATE = os.environ.get("MIGRATE_FILL_STATE") or None


def configure_logging(name: str = "pipeline"):
    logging.basicConfig(
        level=DEFAULT_LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger(name)


def write_json(path: Path, payload: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2, sort_keys=True)


def split_csv_arg(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    return [s.strip() for s in value.split(",") if s.strip()]


def read_table(path: Path, categorical: bool = False) -> pd.DataFrame:
    """Read a CSV or Parquet table; with ``categorical``, CSV text columns become `category`."""
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    df = pd.read_csv(path)
    if categorical:
        text_cols = df.select_dtypes(include="object").columns
        df[text_cols] = df[text_cols].astype("category")
    return df
