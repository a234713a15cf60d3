from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from icp_compare.api.client import ApiError, ICPApiClient
from icp_compare.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config, resolve_api_settings
from icp_compare.errors import ComparisonError
from icp_compare.excel.columns import require_columns, resolve_columns
from icp_compare.excel.reader import read_workbook
from icp_compare.logging.error_log import ErrorLogBuffer
from icp_compare.logging.init import enable_debug, log_summary, setup_logging
from icp_compare.models.uploaded_file import UploadedFile
from icp_compare.services.normalizer import normalize_uploaded_rows
from icp_compare.services.session import ComparisonSession
from icp_compare.services.sheet_store import SavedSheetRepository
from icp_compare.services.summary import render_result_table, summary_fields

"""CLI entrypoint.

Commands:
- sheets   list saved ICP sheets
- compare  score one spreadsheet against a saved ICP sheet
- inspect  show how a spreadsheet would be read (no network)
- upload   store a spreadsheet as a new ICP sheet
- delete   delete a saved ICP sheet (irreversible)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_COMPARISON_FAILED = 2

FIRST_SHEET_NOTE = "Only the first sheet of the workbook is read; other sheets are ignored."


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so that ICP_* variables override config/icp.yml."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="icp-compare", description="Score a spreadsheet against a saved ICP sheet")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("sheets", help="List saved ICP sheets")

    cmp = sub.add_parser("compare", help="Compare a spreadsheet against a saved ICP sheet", epilog=FIRST_SHEET_NOTE)
    cmp.add_argument("--sheet", required=True, help="Saved ICP sheet name")
    cmp.add_argument("file", type=Path, help=".xlsx or .xls file to score")

    ins = sub.add_parser("inspect", help="Print headers, resolved columns and first rows", epilog=FIRST_SHEET_NOTE)
    ins.add_argument("file", type=Path)
    ins.add_argument("--rows", type=int, default=5, help="Number of normalized rows to show")

    up = sub.add_parser("upload", help="Store a spreadsheet as a new ICP sheet")
    up.add_argument("--name", required=True, help="Sheet name")
    up.add_argument("file", type=Path)

    rm = sub.add_parser("delete", help="Delete a saved ICP sheet (irreversible)")
    rm.add_argument("uuid")
    return p.parse_args(argv)


def _inspect(path: Path, limit: int) -> int:
    try:
        workbook = read_workbook(path)
        workbook.require_rows()
    except ComparisonError as e:
        print(f"inspect: {e.user_message}")
        return EXIT_COMPARISON_FAILED
    print(f"FILE: {path.name} sheets={workbook.sheet_names}")
    print(f"  SHEET: {workbook.sheet_name} rows={len(workbook.rows)} header={workbook.header}")
    index = resolve_columns(workbook.header)
    print(f"  columns: company={index.company} designation={index.designation}")
    try:
        require_columns(index)
    except ComparisonError as e:
        print(f"  {e.user_message}")
        return EXIT_COMPARISON_FAILED
    records = normalize_uploaded_rows(workbook.rows, index)
    print(f"  records={len(records)}")
    for r in records[:limit]:
        print("   ", r.to_payload())
    return EXIT_SUCCESS


def _print_sheets(repo: SavedSheetRepository) -> None:
    sheets = repo.list_sheets()
    if not sheets:
        print("no saved ICP sheets")
        return
    # 表示名は "_" より前; compare --sheet には保存名をそのまま渡す
    for s in sheets:
        print(f"{s.display_name}\t{s.sheet_name}\t{s.uuid}\trows={len(s.rows)}")


def _compare(repo: SavedSheetRepository, client: ICPApiClient, sheet: str, path: Path, log_dir: Path) -> int:
    logger = setup_logging()
    if not path.is_file():
        logger.error(f"file not found: {path}")
        return EXIT_COMPARISON_FAILED
    error_log = ErrorLogBuffer(log_dir)
    session = ComparisonSession(repo, client, error_log=error_log)
    session.select_sheet(sheet)
    session.select_file(UploadedFile.from_path(path))
    result = session.run()
    written = error_log.flush()
    if written is not None:
        logger.debug(f"error log written: {written}")
    if result is None:
        return EXIT_COMPARISON_FAILED
    for line in render_result_table(result):
        print(line)
    log_summary(summary_fields(result, sheet, path.name))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] が渡された場合に sys.argv[1:] を読まないよう None のときのみ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug()

    if args.command == "inspect":
        return _inspect(args.file, args.rows)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    api = resolve_api_settings(cfg)
    client = ICPApiClient(api.base_url, api.mapping_base_url, api.token, timeout=api.timeout)
    repo = SavedSheetRepository(client, api.user_id)

    if args.command == "compare":
        return _compare(repo, client, args.sheet, args.file, Path(cfg.error_log_dir))

    try:
        if args.command == "sheets":
            _print_sheets(repo)
        elif args.command == "upload":
            if not args.file.is_file():
                logger.error(f"file not found: {args.file}")
                return EXIT_FATAL
            upload = UploadedFile.from_path(args.file)
            if not upload.is_accepted:
                logger.error(f"unsupported file type: {args.file.name}")
                return EXIT_FATAL
            res = repo.upload_sheet(upload, args.name)
            logger.info(f"upload: status={res.get('status')} {res.get('message') or ''}".rstrip())
        elif args.command == "delete":
            res = repo.delete_sheet(args.uuid)
            logger.info(res.get("message") or "ICP list deleted")
    except ApiError as e:
        logger.error(f"api: {e.server_message or e}")
        return EXIT_FATAL
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
