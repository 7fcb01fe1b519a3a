import argparse
import logging
import sys
from datetime import datetime, timezone

from tqdm import tqdm

from snipkeep import CodeHighlight, Settings, SnippetError, SnippetRepository, filter_snippets, render_snippet
from snipkeep.exception_handler import ErrorHandler
from snipkeep.render import write_runs
from snipkeep.store import RedisSnippetStore, create_redis_connection


logger = logging.getLogger("snipkeep")


def _parse_date(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tag",
        "-t",
        dest="tags",
        action="append",
        help="Only snippets with this tag (repeatable)",
    )
    parser.add_argument(
        "--language",
        "-l",
        dest="languages",
        action="append",
        help="Only snippets in this language (repeatable)",
    )
    parser.add_argument("--from", dest="from_date", type=_parse_date, help="Recorded on or after (YYYY-MM-DD)")
    parser.add_argument("--to", dest="to_date", type=_parse_date, help="Recorded before (YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Store, list and move code snippets")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Print stored snippets")
    _add_filter_arguments(list_parser)
    list_parser.add_argument(
        "--legacy",
        action="store_true",
        help="Use the single-line header layout",
    )

    show_parser = subparsers.add_parser("show", help="Print one snippet")
    show_parser.add_argument("index", type=int)

    delete_parser = subparsers.add_parser("delete", help="Delete one snippet")
    delete_parser.add_argument("index", type=int)

    export_parser = subparsers.add_parser("export", help="Write snippets as a JSON stream")
    export_parser.add_argument("file", nargs="?", help="Output file (default: stdout)")
    _add_filter_arguments(export_parser)

    import_parser = subparsers.add_parser("import", help="Add snippets from a JSON stream")
    import_parser.add_argument("file", help="File written by export")

    return parser


def main() -> None:
    args = build_parser().parse_args()

    settings = Settings.from_env()
    error_handler = ErrorHandler(settings.log_level)
    languages = settings.load_languages()
    store = RedisSnippetStore(create_redis_connection(settings.redis_url), key_prefix=settings.key_prefix)
    repository = SnippetRepository(store, languages=languages, error_handler=error_handler)

    try:
        if args.command in ("list", "export"):
            snippets = filter_snippets(
                repository.list_snippets(),
                languages=args.languages,
                tags=args.tags,
                from_date=args.from_date,
                to_date=args.to_date,
            )
            if args.command == "export":
                if args.file:
                    with open(args.file, "w", encoding="utf-8") as file_handle:
                        count = repository.export_stream(file_handle, snippets)
                    tqdm.write(f"✅ Exported {count} snippets to: {args.file}")
                else:
                    repository.export_stream(sys.stdout, snippets)
            else:
                highlighter = CodeHighlight(settings.theme)
                for snippet in snippets:
                    write_runs(render_snippet(snippet, highlighter, languages, legacy=args.legacy), sys.stdout)
        elif args.command == "show":
            snippet = repository.get(args.index)
            if snippet is None:
                print(f"Error: No snippet with index {args.index}", file=sys.stderr)
                sys.exit(1)
            write_runs(render_snippet(snippet, CodeHighlight(settings.theme), languages), sys.stdout)
        elif args.command == "delete":
            if not repository.delete(args.index):
                print(f"Error: No snippet with index {args.index}", file=sys.stderr)
                sys.exit(1)
            tqdm.write(f"✅ Deleted snippet #{args.index}")
        elif args.command == "import":
            with open(args.file, "r", encoding="utf-8") as file_handle, tqdm(unit="snippet") as progress:
                imported = repository.import_stream(
                    file_handle,
                    source=args.file,
                    on_record=lambda _result: progress.update(1),
                )
            tqdm.write(f"✅ Imported {len(imported)} snippets from: {args.file}")
    except KeyboardInterrupt:
        print("\n⚠️ Interrupted", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except SnippetError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.exception("Fatal error")
        print("\n❌ Fatal error occurred. See log for details.", file=sys.stderr)
        sys.exit(1)

    report = error_handler.format_error_report()
    if report:
        tqdm.write(report)


if __name__ == "__main__":
    main()
