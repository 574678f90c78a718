"""Talent-bank directory: paginated, searchable listing and membership."""

from .pagination import (
    DEFAULT_PER_PAGE,
    DirectoryQuery,
    InMemoryPagination,
    PaginationStrategy,
    ServerPagination,
    TalentBankPage,
    entry_matches,
    last_page_for,
    sort_entries,
)
from .service import DirectoryBrowser, TalentBankDirectory

__all__ = [
    "TalentBankDirectory",
    "DirectoryBrowser",
    "DirectoryQuery",
    "TalentBankPage",
    "PaginationStrategy",
    "ServerPagination",
    "InMemoryPagination",
    "DEFAULT_PER_PAGE",
    "entry_matches",
    "last_page_for",
    "sort_entries",
]
