"""
Orchestrate the full pipeline for credit migration matrices.

Cleaning steps:
0) cleaning_scripts.00_prep_dirs
   - Output (with --mock): data/mock_credit.csv
1) cleaning_scripts.01_summarize_migration
   - Input: data/mock_credit.csv (or --input)
   - Output: data_clean/migration_summary.parquet
2) cleaning_scripts.02_qc_and_finalize
   - Input: data_clean/migration_summary.parquet
   - Output: reports/prep_summary.json

Modelling steps:
3) modelling_scripts.01_build_migration_matrix
   - Input: data_clean/migration_summary.parquet
   - Output: data_clean/migration_matrix.csv
4) modelling_scripts.02_validation
   - Inputs: data_clean/migration_summary.parquet, data_clean/migration_matrix.csv
   - Output: reports/validation_report.json

Usage:
  python -m run_pipeline \
    --mock \
    --metric principal_balance \
    --state-order AAA,AA,A,BBB,BB,B,CCC,D


CLI:
- --mock: Generate data/mock_credit.csv before summarizing
- --input: Observations CSV/Parquet (defaults to data/mock_credit.csv)
- --id, --time, --state: Observation column names
- --metric: Metric column to aggregate; counts ids when omitted
- --no-percent: Keep absolute amounts instead of row shares
- --fill-state: State for ids observed at only one date
- --state-order: Comma-separated state order, best to worst

Notes:
- Each script is responsible for creating its output directories if missing.
- This orchestrator passes common parameters along and logs completion of each step.
"""
import argparse
import subprocess
import sys
from typing import List, Optional
from cleaning_scripts.common import configure_logging


def run_module(module: str, args: Optional[List[str]] = None):
    args = args or []
    cmd = [sys.executable, "-m", module] + args
    print("$", " ".join(cmd))
    res = subprocess.run(cmd, check=True)
    return res.returncode


def main():
    parser = argparse.ArgumentParser(description="Run full migration pipeline (cleaning + modelling)")
    parser.add_argument("--mock", action="store_true", help="Generate mock observations first")
    parser.add_argument("--input", type=str, default=None, help="Observations CSV/Parquet")
    parser.add_argument("--id", type=str, default=None, help="Entity id column")
    parser.add_argument("--time", type=str, default=None, help="Observation date column")
    parser.add_argument("--state", type=str, default=None, help="Credit state column")
    parser.add_argument("--metric", type=str, default=None, help="Metric column; counts ids when omitted")
    parser.add_argument("--no-percent", action="store_true", help="Keep absolute amounts instead of row shares")
    parser.add_argument("--fill-state", type=str, default=None, help="State for ids observed at only one date")
    parser.add_argument("--state-order", type=str, default=None, help="Comma-separated state order")
    args = parser.parse_args()

    log = configure_logging("pipeline")

    # 0) Directories (+ mock data)
    run_module("cleaning_scripts.00_prep_dirs", ["--mock"] if args.mock else [])
    log.info("Step 0 complete: directories ready")

    # 1) Summarize observations
    args1 = []
    for flag, value in (("--input", args.input), ("--id", args.id), ("--time", args.time),
                        ("--state", args.state), ("--metric", args.metric),
                        ("--fill-state", args.fill_state), ("--state-order", args.state_order)):
        if value is not None:
            args1 += [flag, value]
    if args.no_percent:
        args1.append("--no-percent")
    run_module("cleaning_scripts.01_summarize_migration", args1)
    log.info("Step 1 complete: migration_summary.parquet ready")

    # 2) QC + report
    run_module("cleaning_scripts.02_qc_and_finalize")
    log.info("Step 2 complete: prep_summary.json written")

    # 3) Build migration matrix
    run_module("modelling_scripts.01_build_migration_matrix")
    log.info("Step 3 complete: migration_matrix.csv written")

    # 4) Validate
    run_module("modelling_scripts.02_validation")
    log.info("Step 4 complete: validation_report.json written")


if __name__ == "__main__":
    main()
