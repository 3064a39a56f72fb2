"""
Summarize two-period observations into one row per (start state, end state) pair.

Inputs:
- data/mock_credit.csv (default) or --input path (CSV or Parquet)

Outputs:
- data_clean/migration_summary.parquet

CLI:
- --input, --output, --id, --time, --state, --metric, --no-percent, --fill-state, --state-order

Usage:
  python -m cleaning_scripts.01_summarize_migration \
    --id customer_id --time date --state risk_rating --metric principal_balance \
    --state-order AAA,AA,A,BBB,BB,B,CCC,D

Notes:
- Parquet output keeps the `category` dtype of the state columns, which the matrix step
  relies on to infer them.
- Without --metric each id counts once (column `count`).
- Ids seen at only one time point are dropped unless --fill-state (or MIGRATE_FILL_STATE) is set.
"""
import argparse
from pathlib import Path
from cleaning_scripts.common import (
    get_paths, ensure_dirs, configure_logging, read_table, split_csv_arg, DEFAULT_FILL_STATE,
)
from cleaning_scripts.summarize import summarize_migration


def main():
    parser = argparse.ArgumentParser(description="Summarize credit state migrations between two dates")
    parser.add_argument("--input", type=str, default=None, help="Path to observations CSV/Parquet")
    parser.add_argument("--output", type=str, default=None, help="Path to save the summary Parquet")
    parser.add_argument("--id", type=str, default="customer_id", help="Entity id column")
    parser.add_argument("--time", type=str, default="date", help="Observation date column")
    parser.add_argument("--state", type=str, default="risk_rating", help="Credit state column")
    parser.add_argument("--metric", type=str, default=None, help="Metric column; counts ids when omitted")
    parser.add_argument("--no-percent", action="store_true", help="Keep absolute amounts instead of row shares")
    parser.add_argument("--fill-state", type=str, default=DEFAULT_FILL_STATE,
                        help="State for ids observed at only one date")
    parser.add_argument("--state-order", type=str, default=None, help="Comma-separated state order, best to worst")
    args = parser.parse_args()

    log = configure_logging("summarize_migration")
    ensure_dirs()

    _, data, clean, _ = get_paths()
    input_path = Path(args.input) if args.input else (data / "mock_credit.csv")
    output_path = Path(args.output) if args.output else (clean / "migration_summary.parquet")

    log.info(f"Reading observations from {input_path}")
    obs = read_table(input_path)

    summary = summarize_migration(
        obs,
        id_col=args.id,
        time_col=args.time,
        state_col=args.state,
        metric_col=args.metric,
        percent=not args.no_percent,
        fill_state=args.fill_state,
        state_order=split_csv_arg(args.state_order),
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    summary.to_parquet(output_path, index=False)
    log.info(f"Wrote migration summary to {output_path} with {len(summary):,} rows")


if __name__ == "__main__":
    main()
