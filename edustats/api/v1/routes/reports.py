"""Result and report API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.api.v1.routes.classes import get_owned_class
from edustats.api.v1.routes.evaluations import get_owned_evaluation
from edustats.api.v1.routes.school_years import get_owned_school_year
from edustats.core.database import get_db
from edustats.core.deps import ActiveUser
from edustats.schemas.report import (
    AnnualReport,
    DistributionBand,
    EvaluationCompareRequest,
    EvaluationComparison,
    EvaluationFullStatistics,
    EvaluationResults,
)
from edustats.services import annual_report as annual_report_service
from edustats.services import results as results_service

router = APIRouter(tags=["Reports"])


@router.get("/results/evaluations/{evaluation_id}", response_model=EvaluationResults)
async def get_evaluation_results(
    evaluation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationResults:
    """
    Result sheet of an evaluation.

    Returns every student's notes, total, moyenne and rank with the class
    statistics measured against the admission threshold.
    """
    evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
    school_class = await get_owned_class(db, evaluation.class_id, current_user)

    results = await results_service.get_evaluation_results(db, school_class, evaluation)
    return EvaluationResults(**results)


@router.get(
    "/results/evaluations/{evaluation_id}/statistics", response_model=EvaluationFullStatistics
)
async def get_evaluation_statistics(
    evaluation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationFullStatistics:
    """Median, standard deviation, quartiles, success rate and score bands of an evaluation."""
    evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
    school_class = await get_owned_class(db, evaluation.class_id, current_user)

    stats = await results_service.get_full_statistics(db, school_class, evaluation)
    return EvaluationFullStatistics(**stats)


@router.get(
    "/results/evaluations/{evaluation_id}/distribution", response_model=list[DistributionBand]
)
async def get_evaluation_distribution(
    evaluation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> list[DistributionBand]:
    """Moyennes counted in five bands from 0 to the class max note."""
    evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
    school_class = await get_owned_class(db, evaluation.class_id, current_user)

    stats = await results_service.get_full_statistics(db, school_class, evaluation)
    return [DistributionBand(**band) for band in stats["distribution"]]


@router.post("/results/evaluations/compare", response_model=EvaluationComparison)
async def compare_evaluations(
    compare_data: EvaluationCompareRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
) -> EvaluationComparison:
    """Compare the class averages of two or more of the teacher's evaluations."""
    evaluations = []
    for evaluation_id in compare_data.evaluation_ids:
        evaluation = await get_owned_evaluation(db, evaluation_id, current_user)
        school_class = await get_owned_class(db, evaluation.class_id, current_user)
        evaluations.append((school_class, evaluation))

    comparison = await results_service.compare_evaluations(db, evaluations)
    return EvaluationComparison(**comparison)


@router.get("/reports/annual", response_model=AnnualReport)
async def get_annual_report(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: ActiveUser,
    class_id: UUID = Query(..., description="Class ID"),
    school_year_id: UUID = Query(..., description="School year ID"),
) -> AnnualReport:
    """Bilan annuel of a class: compositions, MGA, decision and recap."""
    school_class = await get_owned_class(db, class_id, current_user)
    school_year = await get_owned_school_year(db, school_year_id, current_user)

    report = await annual_report_service.build_annual_report(db, school_class, school_year)
    return AnnualReport(**report)
