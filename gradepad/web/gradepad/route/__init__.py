"""Route aggregation for the grading web application."""

from fastapi import APIRouter

from . import grading

router = APIRouter()
router.include_router(grading.router)
