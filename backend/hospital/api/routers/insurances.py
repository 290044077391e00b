from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hospital import crud, schemas
from hospital.api.deps import PageParams, get_db

router = APIRouter(
    prefix="/insurances",
    tags=["Insurances"],
)

@router.post("/", response_model=schemas.Insurance, status_code=201)
def create_insurance(insurance_in: schemas.InsuranceCreate, db: Session = Depends(get_db)):
    return crud.insurance.create(db, insurance_in)


@router.get("/", response_model=schemas.Page[schemas.Insurance])
def list_insurances(params: PageParams = Depends(), db: Session = Depends(get_db)):
    page = crud.insurance.get_all(db, page=params.page, size=params.size, sort=params.sort)
    return schemas.Page[schemas.Insurance].model_validate(page, from_attributes=True)


@router.get("/{insurance_id}", response_model=schemas.Insurance)
def read_insurance(insurance_id: int, db: Session = Depends(get_db)):
    return crud.insurance.get(db, insurance_id)


@router.patch("/{insurance_id}", response_model=schemas.Insurance)
def update_insurance(insurance_id: int, insurance_in: schemas.InsuranceUpdate, db: Session = Depends(get_db)):
    return crud.insurance.update(db, insurance_id, insurance_in)


@router.delete("/{insurance_id}", status_code=204)
def delete_insurance(insurance_id: int, db: Session = Depends(get_db)):
    """
    Only unlinked policies can be deleted here; a patient's policy goes
    through PATCH /patients/{id} or with the patient.
    """
    crud.insurance.delete(db, insurance_id)
    return None
