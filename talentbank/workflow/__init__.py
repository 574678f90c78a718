"""Workflow facade over matching, suggestions and the talent-bank directory."""

from .errors import describe_error, is_business_error
from .service import TalentBankWorkflow

__all__ = ["TalentBankWorkflow", "describe_error", "is_business_error"]
