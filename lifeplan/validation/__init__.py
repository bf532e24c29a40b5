"""Validation package."""

from lifeplan.validation.validator import PlanValidator

__all__ = ["PlanValidator"]
