"""
Validate the migration matrix against the summary it was built from, cell by (start, end) pair.

Inputs:
- data_clean/migration_summary.parquet (default) or --summary path
- data_clean/migration_matrix.csv (default) or --matrix path

Outputs:
- reports/validation_report.json

CLI:
- --summary, --matrix, --state-start, --state-end, --metric

Usage:
  python -m modelling_scripts.02_validation
"""
import argparse
from pathlib import Path
import pandas as pd
from cleaning_scripts.common import get_paths, ensure_dirs, configure_logging, read_table, write_json
from .lib import resolve_columns, validate_migration_matrix


def main():
    parser = argparse.ArgumentParser(description="Validate migration matrix placement against its summary")
    parser.add_argument("--summary", type=str, default=None, help="Path to migration summary")
    parser.add_argument("--matrix", type=str, default=None, help="Path to migration matrix CSV")
    parser.add_argument("--state-start", type=str, default=None)
    parser.add_argument("--state-end", type=str, default=None)
    parser.add_argument("--metric", type=str, default=None)
    args = parser.parse_args()

    log = configure_logging("validation")
    ensure_dirs()

    _, _, clean, reports = get_paths()
    summary_path = Path(args.summary) if args.summary else (clean / "migration_summary.parquet")
    matrix_path = Path(args.matrix) if args.matrix else (clean / "migration_matrix.csv")

    summary = read_table(summary_path, categorical=True)
    mat = pd.read_csv(matrix_path, index_col=0)

    roles = resolve_columns(summary, args.state_start, args.state_end, args.metric, notify=log.info)
    issues = validate_migration_matrix(summary, mat, roles["state_start"], roles["state_end"], roles["metric"])

    report = {
        "summary_path": str(summary_path),
        "matrix_path": str(matrix_path),
        "columns": roles,
        "shape": list(mat.shape),
        "valid": len(issues) == 0,
        "issues": issues,
    }
    write_json(reports / "validation_report.json", report)
    if issues:
        log.warning(f"Validation found issues: {issues}")
    else:
        log.info("Validation passed with no issues")


if __name__ == "__main__":
    main()
