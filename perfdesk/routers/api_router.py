from fastapi import APIRouter
from perfdesk.routers import auth, employees, kpi, apar, projects

# Centralized API router hub; main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(employees.router, tags=["Employees"])
api_router.include_router(projects.router, tags=["Projects"])
api_router.include_router(kpi.router, tags=["KPI"])
api_router.include_router(apar.router, tags=["APAR"])
