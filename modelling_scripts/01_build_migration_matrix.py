"""
Build the migration matrix from a migration summary.

Inputs:
- data_clean/migration_summary.parquet (default) or --input path

Outputs:
- data_clean/migration_matrix.csv

CLI:
- --input, --output, --state-start, --state-end, --metric

Usage:
  python -m modelling_scripts.01_build_migration_matrix \
    --state-start risk_rating_start --state-end risk_rating_end --metric principal_balance

Notes: Columns not given on the command line are inferred from the summary's dtypes and names.
CSV inputs have their text columns read as `category`. Creates output directories if missing.
"""
import argparse
from pathlib import Path
from cleaning_scripts.common import get_paths, ensure_dirs, configure_logging, read_table
from .lib import build_matrix


def main():
    parser = argparse.ArgumentParser(description="Build migration matrix from migration_summary.parquet")
    parser.add_argument("--input", type=str, default=None, help="Path to migration summary (Parquet or CSV)")
    parser.add_argument("--output", type=str, default=None, help="Path to save migration matrix CSV")
    parser.add_argument("--state-start", type=str, default=None, help="Starting state column (inferred if omitted)")
    parser.add_argument("--state-end", type=str, default=None, help="Ending state column (inferred if omitted)")
    parser.add_argument("--metric", type=str, default=None, help="Metric column (inferred if omitted)")
    args = parser.parse_args()

    log = configure_logging("build_migration_matrix")
    ensure_dirs()

    _, _, clean, _ = get_paths()
    input_path = Path(args.input) if args.input else (clean / "migration_summary.parquet")
    output_path = Path(args.output) if args.output else (clean / "migration_matrix.csv")

    log.info(f"Reading migration summary from {input_path}")
    summary = read_table(input_path, categorical=True)

    mat = build_matrix(summary, args.state_start, args.state_end, args.metric, notify=log.info)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    mat.to_csv(output_path)
    log.info(f"Wrote migration matrix to {output_path} with shape {mat.shape}")


if __name__ == "__main__":
    main()
