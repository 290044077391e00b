import argparse
import logging
import os
import sys

from hospital.db.base import Base
from hospital.db.session import SessionLocal, engine
from hospital.importer import import_patients, read_patient_file

# --- Setup Logging ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def main() -> int:
    parser = argparse.ArgumentParser(description="Load patients (and their insurance) from a CSV or Excel file.")
    parser.add_argument("file", help="CSV/XLSX with name, birth_date, email, gender, blood_group, "
                                     "policy_number, provider, valid_until columns")
    args = parser.parse_args()

    if not os.path.exists(args.file):
        logging.error(f"Patient file not found at: {args.file}")
        return 1

    Base.metadata.create_all(bind=engine)
    logging.info(f"Reading patients from {args.file}...")
    df = read_patient_file(args.file)

    db = SessionLocal()
    try:
        report = import_patients(db, df)
    finally:
        db.close()

    logging.info("--- Import Complete ---")
    logging.info(f"Created: {len(report.created)}")
    for line, reason in sorted(report.skipped.items()):
        logging.info(f"Skipped line {line}: {reason}")
    return 0 if not report.skipped else 2


if __name__ == "__main__":
    sys.exit(main())
