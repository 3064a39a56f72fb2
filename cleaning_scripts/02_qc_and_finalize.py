"""
QC checks on the migration summary and a JSON summary report.

Inputs:
- data_clean/migration_summary.parquet (default) or --input path

Outputs:
- reports/prep_summary.json

CLI:
- --input, --state-start, --state-end, --metric
"""
import argparse
from pathlib import Path
from cleaning_scripts.common import get_paths, ensure_dirs, configure_logging, read_table, write_json
from modelling_scripts.lib import resolve_columns, summary_qc


def main():
    parser = argparse.ArgumentParser(description="QC checks and summary report")
    parser.add_argument("--input", type=str, default=None, help="Path to migration summary")
    parser.add_argument("--state-start", type=str, default=None)
    parser.add_argument("--state-end", type=str, default=None)
    parser.add_argument("--metric", type=str, default=None)
    args = parser.parse_args()

    log = configure_logging("qc_finalize")
    ensure_dirs()

    _, _, clean, reports = get_paths()
    summary_path = Path(args.input) if args.input else (clean / "migration_summary.parquet")
    summary = read_table(summary_path, categorical=True)

    roles = resolve_columns(summary, args.state_start, args.state_end, args.metric, notify=log.info)
    qc = summary_qc(summary, roles["state_start"], roles["state_end"], roles["metric"])

    report = {
        "summary_path": str(summary_path),
        "columns": roles,
        "columns_present": [str(c) for c in summary.columns],
        "qc": qc,
    }
    write_json(reports / "prep_summary.json", report)

    flags = [k for k in ("unique_pairs_ok", "complete_grid_ok", "sorted_order_ok") if not qc[k]]
    if flags:
        log.warning(f"Summary does not fit the row-major matrix layout: {flags}")
    log.info(f"Wrote summary report with keys: {list(report.keys())}")


if __name__ == "__main__":
    main()
