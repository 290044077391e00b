from fastapi import APIRouter

from hospital.api.routers import appointments, departments, doctors, insurances, patients

api_router = APIRouter()

api_router.include_router(patients.router)
api_router.include_router(insurances.router)
api_router.include_router(doctors.router)
api_router.include_router(departments.router)
api_router.include_router(appointments.router)
