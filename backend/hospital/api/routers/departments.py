from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hospital import crud, schemas
from hospital.api.deps import PageParams, get_db

router = APIRouter(
    prefix="/departments",
    tags=["Departments"],
)

@router.post("/", response_model=schemas.Department, status_code=201)
def create_department(department_in: schemas.DepartmentCreate, db: Session = Depends(get_db)):
    return crud.department.create(db, department_in)


@router.get("/", response_model=schemas.Page[schemas.Department])
def list_departments(params: PageParams = Depends(), db: Session = Depends(get_db)):
    page = crud.department.get_all(db, page=params.page, size=params.size, sort=params.sort)
    return schemas.Page[schemas.Department].model_validate(page, from_attributes=True)


@router.get("/{department_id}", response_model=schemas.Department)
def read_department(department_id: int, db: Session = Depends(get_db)):
    return crud.department.get(db, department_id)


@router.patch("/{department_id}", response_model=schemas.Department)
def update_department(department_id: int, department_in: schemas.DepartmentUpdate, db: Session = Depends(get_db)):
    return crud.department.update(db, department_id, department_in)


@router.delete("/{department_id}", status_code=204)
def delete_department(department_id: int, db: Session = Depends(get_db)):
    crud.department.delete(db, department_id)
    return None


@router.put("/{department_id}/doctors/{doctor_id}", response_model=schemas.Department)
def add_department_doctor(department_id: int, doctor_id: int, db: Session = Depends(get_db)):
    return crud.department.add_doctor(db, department_id, doctor_id)


@router.delete("/{department_id}/doctors/{doctor_id}", response_model=schemas.Department)
def remove_department_doctor(department_id: int, doctor_id: int, db: Session = Depends(get_db)):
    return crud.department.remove_doctor(db, department_id, doctor_id)
