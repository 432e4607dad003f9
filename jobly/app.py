import argparse
import json

from .env import load_env, get_database_url, get_log_level

from . import __version__
from .database import get_engine, init_database
from .errors import JoblyError
from .logger import get_logger
from .search import JobSearchCriteria
from .storage import JobStore


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def _store(args: argparse.Namespace) -> JobStore:
    engine = get_engine(args.database_url)
    return JobStore(engine)


def cmd_init_db(args: argparse.Namespace) -> None:
    engine = get_engine(args.database_url)
    init_database(engine)
    print(f"Database ready: {engine.url.render_as_string(hide_password=True)}")


def cmd_create(args: argparse.Namespace) -> None:
    job = _store(args).create({
        "title": args.title,
        "salary": args.salary,
        "equity": args.equity,
        "companyHandle": args.company,
    })
    _print_json({"job": job})


def cmd_list(args: argparse.Namespace) -> None:
    _print_json({"jobs": _store(args).find_all()})


def cmd_get(args: argparse.Namespace) -> None:
    _print_json({"job": _store(args).get(args.title)})


def cmd_search(args: argparse.Namespace) -> None:
    criteria = JobSearchCriteria(
        title=args.title,
        min_salary=args.min_salary,
        has_equity=True if args.has_equity else None,
    )
    _print_json({"jobs": _store(args).filter(criteria)})


def cmd_update(args: argparse.Namespace) -> None:
    data = {}
    if args.salary is not None:
        data["salary"] = args.salary
    if args.equity is not None:
        data["equity"] = args.equity
    _print_json({"job": _store(args).update(args.title, data)})


def cmd_remove(args: argparse.Namespace) -> None:
    _store(args).remove(args.title)
    _print_json({"deleted": args.title})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobly", description="Jobly jobs store CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--database-url", help="SQLAlchemy URL (default: DATABASE_URL or sqlite:///jobly.db)")

    subparsers = parser.add_subparsers(dest="command")
    ini = subparsers.add_parser("init-db", help="Create the companies and jobs tables")
    ini.set_defaults(func=cmd_init_db)

    cre = subparsers.add_parser("create", help="Create a job")
    cre.add_argument("--title", required=True, help="Job title (unique)")
    cre.add_argument("--salary", type=int, help="Salary")
    cre.add_argument("--equity", help="Equity as a decimal string between 0 and 1, e.g. 0.05")
    cre.add_argument("--company", required=True, help="Company handle")
    cre.set_defaults(func=cmd_create)

    lst = subparsers.add_parser("list", help="List all jobs ordered by title")
    lst.set_defaults(func=cmd_list)

    get = subparsers.add_parser("get", help="Show one job by exact title")
    get.add_argument("--title", required=True, help="Job title")
    get.set_defaults(func=cmd_get)

    sea = subparsers.add_parser("search", help="Search jobs by title substring, minimum salary and equity")
    sea.add_argument("--title", help="Case-insensitive title substring")
    sea.add_argument("--min-salary", type=int, help="Minimum salary (inclusive)")
    sea.add_argument("--has-equity", action="store_true", help="Only jobs with equity > 0")
    sea.set_defaults(func=cmd_search)

    upd = subparsers.add_parser("update", help="Change salary and/or equity of a job")
    upd.add_argument("--title", required=True, help="Job title")
    upd.add_argument("--salary", type=int, help="New salary")
    upd.add_argument("--equity", help="New equity")
    upd.set_defaults(func=cmd_update)

    rem = subparsers.add_parser("remove", help="Delete a job")
    rem.add_argument("--title", required=True, help="Job title")
    rem.set_defaults(func=cmd_remove)

    return parser


def main(argv=None):
    # Load .env if present (DATABASE_URL, JOBLY_LOG_LEVEL, ...)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if args.database_url is None:
        args.database_url = get_database_url()

    if hasattr(args, "func"):
        logger = get_logger(level=get_log_level())
        try:
            args.func(args)
        except JoblyError as e:
            raise SystemExit(f"Error ({e.status}): {e.message}")
        finally:
            logger.log_metrics_summary()
        return

    parser.print_help()


if __name__ == "__main__":
    main()
