from datetime import date

import pandas as pd

from hospital import crud
from hospital.importer import import_patients, read_patient_file


def test_import_creates_patients_and_skips_bad_rows(db):
    df = pd.DataFrame(
        [
            {"name": "Asha Rao", "birth_date": "1990-04-02", "email": "asha@x.com", "blood_group": "O+",
             "policy_number": "POL-1", "provider": "Acme", "valid_until": "2030-01-01"},
            {"name": "Kiran Das", "birth_date": "1979-11-20", "email": "kiran@x.com", "blood_group": None,
             "policy_number": None, "provider": None, "valid_until": None},
            {"name": "Asha Again", "birth_date": None, "email": "asha@x.com", "blood_group": None,
             "policy_number": None, "provider": None, "valid_until": None},
            {"name": None, "birth_date": None, "email": "nameless@x.com", "blood_group": None,
             "policy_number": None, "provider": None, "valid_until": None},
        ]
    )

    report = import_patients(db, df)

    assert len(report.created) == 2
    assert sorted(report.skipped) == [4, 5]
    asha = crud.patient.get_by_email(db, "asha@x.com")
    assert asha.birth_date == date(1990, 4, 2)
    assert asha.insurance.policy_number == "POL-1"
    assert crud.patient.get_by_email(db, "kiran@x.com").insurance is None


def test_read_patient_file_normalises_headers(tmp_path):
    path = tmp_path / "patients.csv"
    path.write_text("Name,Birth Date,Email\nAsha Rao,1990-04-02,asha@x.com\n")

    df = read_patient_file(str(path))

    assert list(df.columns) == ["name", "birth_date", "email"]
    assert len(df) == 1
