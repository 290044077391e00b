"""
Bulk patient intake from spreadsheets.

Each row becomes one patient (plus its insurance when the policy columns are
filled) created through the regular repository, so every row gets the same
checks as an API request. A row that breaks a constraint is logged and
skipped; it does not stop the rest of the file.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import ValidationError
from sqlalchemy.orm import Session

from hospital import crud, schemas
from hospital.core.exceptions import RecordStoreError

logger = logging.getLogger(__name__)

PATIENT_COLUMNS = ["name", "birth_date", "email", "gender", "blood_group"]
INSURANCE_COLUMNS = ["policy_number", "provider", "valid_until"]
DATE_COLUMNS = ["birth_date", "valid_until"]


@dataclass
class ImportReport:
    created: List[int] = field(default_factory=list)
    skipped: Dict[int, str] = field(default_factory=dict)


def read_patient_file(file_path: str) -> pd.DataFrame:
    if file_path.lower().endswith((".xlsx", ".xls")):
        df = pd.read_excel(file_path)
    else:
        df = pd.read_csv(file_path)
    # Normalise headers like "Birth Date" to birth_date
    df.columns = [str(column).strip().lower().replace(" ", "_") for column in df.columns]
    return df


def _cell(row: pd.Series, column: str) -> Optional[Any]:
    if column not in row.index:
        return None
    value = row[column]
    if pd.isna(value):
        return None
    if column in DATE_COLUMNS:
        return pd.to_datetime(value).date()
    return str(value).strip() or None


def row_to_patient(row: pd.Series) -> schemas.PatientCreate:
    data: Dict[str, Any] = {column: _cell(row, column) for column in PATIENT_COLUMNS}
    insurance = {column: _cell(row, column) for column in INSURANCE_COLUMNS}
    if any(value is not None for value in insurance.values()):
        data["insurance"] = insurance
    return schemas.PatientCreate(**data)


def import_patients(db: Session, df: pd.DataFrame) -> ImportReport:
    report = ImportReport()
    for index, row in df.iterrows():
        line = int(index) + 2  # header is line 1
        try:
            patient_in = row_to_patient(row)
            db_patient = crud.patient.create(db, patient_in)
        except (ValidationError, RecordStoreError) as e:
            logger.warning(f"Skipping line {line}: {e}")
            report.skipped[line] = str(e)
            continue
        report.created.append(db_patient.id)
    logger.info(f"Imported {len(report.created)} patient(s), skipped {len(report.skipped)}.")
    return report
