"""API v1 router aggregating all route modules."""

from fastapi import APIRouter

from edustats.api.v1.routes import (
    admin,
    auth,
    class_average_configs,
    class_thresholds,
    classes,
    evaluation_formulas,
    evaluations,
    exports,
    moyennes,
    notes,
    payments,
    reports,
    school_years,
    students,
    subjects,
    trial,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(trial.router)
api_router.include_router(payments.router)
api_router.include_router(admin.router)
api_router.include_router(school_years.router)
api_router.include_router(classes.router)
api_router.include_router(students.router)
api_router.include_router(subjects.router)
api_router.include_router(evaluations.router)
api_router.include_router(notes.router)
api_router.include_router(moyennes.router)
api_router.include_router(class_average_configs.router)
api_router.include_router(class_thresholds.router)
api_router.include_router(evaluation_formulas.router)
api_router.include_router(reports.router)
api_router.include_router(exports.router)
