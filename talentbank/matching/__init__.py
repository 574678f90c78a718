"""Skill-overlap matching between talent-bank candidates and job requisitions.

This module provides:
- SkillMatcher: stateless scoring and ranking service
- MatchResult: skill overlap of one candidate with one job
- JobMatch: job ranked for a selected candidate, with suggestion state
- Serialization helpers for JSON output
"""

from .engine import SkillMatcher
from .models import JobMatch, MatchResult
from .utils import job_match_to_dict, match_result_to_dict

__all__ = [
    "SkillMatcher",
    "MatchResult",
    "JobMatch",
    "match_result_to_dict",
    "job_match_to_dict",
]
