"""CLI entry point: python -m intake FILE

Runs the intake flow for one pasted ficha dump:
  1. Parse text -> case drafts (legacy single record or modern batch)
  2. Assemble drafts -> fully-defaulted CaseRecords (dropping incomplete ones)
  3. Create the records in the case registry
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.engine import make_url

from models.processo import CaseRecord

from intake.assembler import MissingEssentialFieldsError, assemble, assemble_batch
from intake.parsers import IntakeMode, IntakeResult, parse_text

logger = logging.getLogger("intake")

DEFAULT_DATABASE_URL = "sqlite:///pipeline/data/processos.db"


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m intake",
        description="Case intake — parse pasted fichas, assemble and register case records.",
    )
    parser.add_argument(
        "input",
        help="Text file with the pasted ficha(s), or '-' to read standard input.",
    )
    parser.add_argument(
        "--cpf",
        default=None,
        help="Taxpayer id typed into the form; overrides the parsed one (single record only).",
    )
    parser.add_argument(
        "--case-number",
        default=None,
        help="Case number typed into the form; overrides the parsed one (single record only).",
    )
    parser.add_argument(
        "--database-url",
        default=os.environ.get("INTAKE_DATABASE_URL", DEFAULT_DATABASE_URL),
        help="SQLAlchemy database URL. Falls back to $INTAKE_DATABASE_URL.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and assemble only, skip registering the records.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the assembled records as JSON on standard output.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        logger.error("Input file not found: %s", path)
        sys.exit(1)
    return path.read_text(encoding="utf-8")


def _assemble(
    result: IntakeResult,
    cpf: str | None,
    case_number: str | None,
) -> list[CaseRecord]:
    """Turn the parse outcome into records, exiting on unrecoverable input."""
    if result.mode is IntakeMode.NONE:
        logger.error(result.warning or "Input is empty — nothing to register")
        sys.exit(1)

    if result.mode is IntakeMode.SINGLE:
        try:
            return [assemble(result.drafts[0], taxpayer_id=cpf, case_number=case_number)]
        except MissingEssentialFieldsError as exc:
            logger.error("Cannot register record: %s (use --cpf / --case-number)", exc)
            sys.exit(1)
        except ValidationError as exc:
            logger.error("Invalid form value: %s", exc)
            sys.exit(1)

    if cpf or case_number:
        logger.warning("--cpf/--case-number are ignored for batch input")
    assembly = assemble_batch(result.drafts)
    if not assembly.records:
        logger.error("No record carries the essential data (case number and CPF)")
        sys.exit(1)
    if assembly.dropped or result.skipped:
        logger.warning(
            "%d of %d records will be registered; the others lack essential data",
            len(assembly.records),
            result.chunks,
        )
    return assembly.records


def _ensure_sqlite_dir(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def _load(records: list[CaseRecord], database_url: str) -> None:
    from intake.loaders import CaseStore

    _ensure_sqlite_dir(database_url)

    def report(done: int, total: int) -> None:
        logger.info("  registered %d/%d", done, total)

    with CaseStore.from_url(database_url) as store:
        store.create_cases(records, progress=report)


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    logger.info("=== Case intake: %s ===", args.input)

    # 1. Parse
    result = parse_text(_read_input(args.input))
    logger.info("Detected %s format — %d record(s)", result.format, len(result.drafts))

    # 2. Assemble
    records = _assemble(result, args.cpf, args.case_number)

    if args.json:
        json.dump([r.model_dump(mode="json") for r in records], sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")

    # 3. Load
    if args.dry_run:
        logger.info("Dry run — skipping registration")
        _print_summary(records)
        return

    _load(records, args.database_url)
    _print_summary(records)
    logger.info("=== Done ===")


def _print_summary(records: list[CaseRecord]) -> None:
    logger.info("--- Summary ---")
    for record in records:
        logger.info(
            "  %s  %s x %s",
            record.case_number,
            record.active_party.main_name,
            record.passive_party.main_name,
        )
    logger.info("  total: %d", len(records))


if __name__ == "__main__":
    main()
