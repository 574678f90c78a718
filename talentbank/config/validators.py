"""Soft checks on the raw configuration dictionary."""

import warnings
from typing import Any, Dict, List

KNOWN_SECTIONS = {"matching", "directory", "notifications", "email", "job_catalog", "logging"}


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    unknown = sorted(set(config_dict) - KNOWN_SECTIONS)
    for section in unknown:
        warning_messages.append(f"Unknown configuration section '{section}' will be ignored")

    directory = config_dict.get("directory", {})
    if isinstance(directory, dict):
        if directory.get("pagination") == "in-memory":
            warning_messages.append(
                "In-memory pagination loads every talent-bank entry per request; "
                "use 'server' for large talent banks"
            )
        max_per_page = directory.get("max_per_page")
        if isinstance(max_per_page, int) and max_per_page > 1000:
            warning_messages.append(
                f"Large max_per_page ({max_per_page}) may cause slow directory pages"
            )

    job_catalog = config_dict.get("job_catalog", {})
    if isinstance(job_catalog, dict):
        base_url = job_catalog.get("base_url")
        if isinstance(base_url, str) and base_url.strip().startswith("http://"):
            warning_messages.append(
                "job_catalog.base_url uses plain http; bearer tokens will be sent unencrypted"
            )

    email = config_dict.get("email", {})
    if isinstance(email, dict) and email.get("use_tls") is False:
        warning_messages.append("email.use_tls is disabled; SMTP credentials may be sent in clear text")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
