"""Test detail endpoints: load, sort and reconcile a commands file."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ..flow_reconciler import InvalidInputError
from ..run_loader import TestFileFormatError, TestFileNotFoundError, load_test_details
from ..schemas import TestDetails

router = APIRouter(prefix="/tests", tags=["tests"])
logger = logging.getLogger(__name__)


@router.get("/details", response_model=TestDetails, response_model_by_alias=True)
def get_test_details(
    path: str = Query(..., description="Path to a commands-(<flow>).json file"),
    screenshots: bool = Query(False, description="Merge flow screenshots into the command list"),
) -> TestDetails:
    try:
        return load_test_details(path, with_screenshots=screenshots)
    except TestFileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except (TestFileFormatError, InvalidInputError) as exc:
        logger.warning("Could not reconstruct test %s: %s", path, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
