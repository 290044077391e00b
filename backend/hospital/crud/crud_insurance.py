from hospital.crud.base import CRUDBase
from hospital.models.insurance import Insurance
from hospital.schemas.insurance import InsuranceCreate, InsuranceUpdate


class CRUDInsurance(CRUDBase[Insurance, InsuranceCreate, InsuranceUpdate]):
    immutable_fields = ("created_at",)


insurance = CRUDInsurance(Insurance)
