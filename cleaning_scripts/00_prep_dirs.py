"""
Create the data_clean/ and reports/ directories, optionally writing mock observations.

Outputs:
- data/mock_credit.csv (with --mock)

Usage:
  python -m cleaning_scripts.00_prep_dirs --mock --n-customers 500
"""
import argparse
from cleaning_scripts.common import get_paths, ensure_dirs, configure_logging
from cleaning_scripts.summarize import make_mock_credit


def main():
    parser = argparse.ArgumentParser(description="Prepare directories and optional mock data")
    parser.add_argument("--mock", action="store_true", help="Write data/mock_credit.csv")
    parser.add_argument("--n-customers", type=int, default=500, help="Customers in the mock data")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for the mock data")
    args = parser.parse_args()

    log = configure_logging("prep_dirs")
    ensure_dirs()
    log.info("Ensured data_clean/ and reports/ directories exist.")

    if args.mock:
        _, data, _, _ = get_paths()
        out_csv = data / "mock_credit.csv"
        out_csv.parent.mkdir(parents=True, exist_ok=True)
        mock = make_mock_credit(n_customers=args.n_customers, seed=args.seed)
        mock.to_csv(out_csv, index=False)
        log.info(f"Wrote mock observations to {out_csv} with {len(mock):,} rows")


if __name__ == "__main__":
    main()
