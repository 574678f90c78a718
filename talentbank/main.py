"""Command-line entry point for the talent bank engine."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from talentbank.config.environment import EnvironmentConfig
from talentbank.config.exceptions import ConfigurationError
from talentbank.config.loader import load_config, validate_config_file
from talentbank.config.models import AppConfig
from talentbank.directory.pagination import InMemoryPagination, ServerPagination
from talentbank.domain.context import RequestContext
from talentbank.domain.exceptions import TalentBankError
from talentbank.domain.models import Candidate, JobRequisition, Priority, SuggestionState
from talentbank.logging import get_logger
from talentbank.logging.config import configure_logging
from talentbank.matching.utils import job_match_to_dict, match_result_to_dict
from talentbank.persistence import (
    CandidateRepository,
    JobRepository,
    PersistenceError,
    close_database,
    get_session,
    init_database,
)
from talentbank.workflow.errors import describe_error, is_business_error
from talentbank.workflow.presenters import (
    entry_to_dict,
    history_to_dict,
    job_to_dict,
    page_to_dict,
    suggestion_to_dict,
)
from talentbank.workflow.service import TalentBankWorkflow

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BUSINESS_ERROR = 2

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file.
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="talentbank",
        description="Talent bank - match candidates to jobs and track job suggestions",
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="Path to configuration file (default: config.yaml or config/config.yaml)")
    parser.add_argument("--log-level", default=None, choices=LOG_LEVELS,
                        help="Log level (overrides config and environment)")
    parser.add_argument("--token", default=None,
                        help="Bearer token for this call (default: TALENTBANK_API_TOKEN)")
    parser.add_argument("--actor", default=None,
                        help="Recruiter identity recorded on suggestions (default: TALENTBANK_ACTOR)")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("jobs", help="List active jobs")

    p = sub.add_parser("matches", help="Rank talent-bank candidates for a job")
    p.add_argument("job_id", type=int)

    p = sub.add_parser("jobs-for", help="Rank active jobs for a candidate")
    p.add_argument("candidate_id", type=int)

    p = sub.add_parser("suggest", help="Suggest a job to a candidate")
    p.add_argument("candidate_id", type=int)
    p.add_argument("job_id", type=int)
    p.add_argument("--note", default=None, help="Note stored with the suggestion")
    p.add_argument("--email", dest="send_email", action=argparse.BooleanOptionalAction,
                   default=None, help="Also send an email (default: notifications.email_by_default)")

    p = sub.add_parser("suggestions", help="List a candidate's suggestions")
    p.add_argument("candidate_id", type=int)

    p = sub.add_parser("history", help="Suggestion history of a candidate, with counters")
    p.add_argument("candidate_id", type=int)

    p = sub.add_parser("status", help="Suggestion of a job to a candidate, if any")
    p.add_argument("candidate_id", type=int)
    p.add_argument("job_id", type=int)

    p = sub.add_parser("transition", help="Record a candidate-side suggestion event")
    p.add_argument("suggestion_id", type=int)
    p.add_argument("state", choices=[s.value for s in SuggestionState])

    p = sub.add_parser("remove-suggestion", help="Remove a suggestion")
    p.add_argument("suggestion_id", type=int)

    p = sub.add_parser("list", help="List talent-bank members")
    p.add_argument("--search", default=None)
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--per-page", type=int, default=None)
    p.add_argument("--priority", choices=[p.value for p in Priority], default=None)
    p.add_argument("--available", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--strategy", choices=["server", "in-memory"], default=None,
                   help="Pagination strategy (default: directory.pagination)")
    p.add_argument("--all", dest="all_pages", action="store_true",
                   help="Print the requested page and every page after it")

    p = sub.add_parser("add", help="Add a candidate to the talent bank")
    p.add_argument("candidate_id", type=int)
    p.add_argument("--notes", default=None)
    p.add_argument("--skill", dest="skills", action="append", default=None,
                   help="Highlighted skill (repeatable)")
    p.add_argument("--priority", choices=[p.value for p in Priority], default=Priority.MEDIUM.value)

    p = sub.add_parser("check", help="Whether a candidate is in the talent bank")
    p.add_argument("candidate_id", type=int)

    p = sub.add_parser("notes", help="Replace the notes of a talent-bank member")
    target = p.add_mutually_exclusive_group(required=True)
    target.add_argument("--candidate", dest="candidate_id", type=int)
    target.add_argument("--entry", dest="entry_id", type=int)
    p.add_argument("notes")

    p = sub.add_parser("update-entry", help="Update a talent-bank member")
    p.add_argument("entry_id", type=int)
    p.add_argument("--priority", choices=[p.value for p in Priority], default=None)
    p.add_argument("--available", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--score", dest="evaluation_score", type=float, default=None)
    p.add_argument("--skill", dest="skills", action="append", default=None,
                   help="Highlighted skill (repeatable, replaces the current list)")

    p = sub.add_parser("remove", help="Remove a member from the talent bank")
    p.add_argument("entry_id", type=int)

    p = sub.add_parser("load", help="Load candidates and jobs from a YAML or JSON file")
    p.add_argument("path", type=Path)

    sub.add_parser("check-config", help="Validate the configuration file and exit")

    return parser


def load_fixtures(path: Path) -> dict:
    """Upsert the ``candidates`` and ``jobs`` listed in a YAML/JSON file.

    Raises:
        ConfigurationError: If the file cannot be read or a record is invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping with 'candidates' and/or 'jobs'")

    try:
        candidates = [Candidate(**item) for item in data.get("candidates", [])]
        jobs = [JobRequisition(**item) for item in data.get("jobs", [])]
    except (TypeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid record in {path}", errors=[str(e)])

    with get_session() as session:
        candidate_repo = CandidateRepository(session)
        for candidate in candidates:
            candidate_repo.upsert(candidate)
        job_repo = JobRepository(session)
        for job in jobs:
            job_repo.upsert(job)

    logger.info(
        f"Loaded {len(candidates)} candidates and {len(jobs)} jobs from {path}",
        extra={"event": "fixtures.loaded", "candidates": len(candidates), "jobs": len(jobs)},
    )
    return {"candidates": len(candidates), "jobs": len(jobs)}


def run_command(args: argparse.Namespace, workflow: TalentBankWorkflow, ctx: RequestContext) -> Any:
    """Execute one subcommand and return its JSON-ready result."""
    command = args.command

    if command == "jobs":
        return [job_to_dict(job) for job in workflow.get_active_jobs(ctx)]
    if command == "matches":
        return [match_result_to_dict(m) for m in workflow.compute_matches(ctx, args.job_id)]
    if command == "jobs-for":
        return [job_match_to_dict(m) for m in workflow.rank_jobs_for_candidate(ctx, args.candidate_id)]
    if command == "suggest":
        suggestion = workflow.create_suggestion(
            ctx, args.candidate_id, args.job_id, note=args.note, send_email=args.send_email
        )
        return suggestion_to_dict(suggestion)
    if command == "suggestions":
        return [suggestion_to_dict(s) for s in workflow.list_suggestions_for_candidate(ctx, args.candidate_id)]
    if command == "history":
        return history_to_dict(workflow.get_suggestion_history(ctx, args.candidate_id))
    if command == "status":
        return suggestion_to_dict(workflow.get_suggestion_status(ctx, args.candidate_id, args.job_id))
    if command == "transition":
        return suggestion_to_dict(
            workflow.record_suggestion_transition(ctx, args.suggestion_id, SuggestionState(args.state))
        )
    if command == "remove-suggestion":
        workflow.remove_suggestion(ctx, args.suggestion_id)
        return {"removed": args.suggestion_id}
    if command == "list":
        strategy = None
        if args.strategy == "server":
            strategy = ServerPagination()
        elif args.strategy == "in-memory":
            strategy = InMemoryPagination()
        if not args.all_pages:
            page = workflow.list_talent_bank(
                ctx,
                search=args.search,
                page=args.page,
                per_page=args.per_page,
                priority=args.priority,
                available=args.available,
                strategy=strategy,
            )
            return page_to_dict(page)
        browser = workflow.browse_talent_bank(
            ctx,
            per_page=args.per_page,
            priority=args.priority,
            available=args.available,
            strategy=strategy,
        )
        browser.search(args.search).go_to(args.page)
        return [page_to_dict(page) for page in browser.pages()]
    if command == "add":
        entry = workflow.add_to_talent_bank(
            ctx, args.candidate_id, notes=args.notes, highlighted_skills=args.skills,
            priority=Priority(args.priority),
        )
        return entry_to_dict(entry)
    if command == "check":
        return {"candidate_id": args.candidate_id,
                "in_talent_bank": workflow.check_talent_bank_membership(ctx, args.candidate_id)}
    if command == "notes":
        entry = workflow.update_talent_bank_notes(
            ctx, args.notes, candidate_id=args.candidate_id, entry_id=args.entry_id
        )
        return entry_to_dict(entry)
    if command == "update-entry":
        entry = workflow.update_talent_bank_entry(
            ctx,
            args.entry_id,
            priority=args.priority,
            available=args.available,
            evaluation_score=args.evaluation_score,
            highlighted_skills=args.skills,
        )
        return entry_to_dict(entry)
    if command == "remove":
        workflow.remove_from_talent_bank(ctx, args.entry_id)
        return {"removed": args.entry_id}

    raise ValueError(f"Unknown command: {command}")


def emit(result: Any) -> None:
    print(json.dumps(result, indent=2, ensure_ascii=False))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code: 0 on success, 2 on a business-rule violation, 1 on any
        other failure (configuration, storage, transport).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "check-config":
        try:
            validate_config_file(args.config)
        except ConfigurationError as e:
            print(f"Configuration Error: {e}", file=sys.stderr)
            return EXIT_FAILURE
        print("Configuration is valid")
        return EXIT_OK

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=environment,
        )

        init_database(env_config.database_url)

        try:
            if args.command == "load":
                emit(load_fixtures(args.path))
                return EXIT_OK

            ctx = RequestContext(
                actor=args.actor or env_config.actor or "cli",
                token=args.token or env_config.api_token,
            )
            workflow = TalentBankWorkflow.from_config(app_config, env_config)

            logger.debug(
                f"Running command {args.command}",
                extra={"event": "cli.command", "command": args.command, "actor": ctx.actor},
            )
            emit(run_command(args, workflow, ctx))
            return EXIT_OK
        finally:
            close_database()

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except TalentBankError as e:
        if is_business_error(e):
            print(f"Warning: {describe_error(e)}", file=sys.stderr)
            return EXIT_BUSINESS_ERROR
        print(f"Error: {describe_error(e)} ({e})", file=sys.stderr)
        logger.error(
            f"Command failed: {e}",
            extra={"event": "cli.failed", "error_type": type(e).__name__},
        )
        return EXIT_FAILURE
    except (PersistenceError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Command failed: {e}",
            extra={"event": "cli.failed", "error_type": type(e).__name__},
        )
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
