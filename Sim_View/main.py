# main.py

"""Entry point for replaying a simulation log in the viewer."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, List, Optional

from Sim_View.config import Config
from Sim_View.errors import ViewerError

logger = logging.getLogger(__name__)

# Table read by each subcommand unless ``--table`` or a config file says otherwise.
DEFAULT_TABLES = {"plane": "logs", "sphere": "sphere"}


def _configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging and capture uncaught exceptions."""

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    def _log_excepthook(exc_type, exc, tb) -> None:
        logging.getLogger(__name__).exception(
            "Uncaught exception", exc_info=(exc_type, exc, tb)
        )

    sys.excepthook = _log_excepthook


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument(
        "-f",
        "--follow",
        action="store_true",
        default=None,
        help="Keep replaying as new records arrive",
    )
    parser.add_argument(
        "-t",
        "--tail",
        action="store_true",
        default=None,
        help="Start shortly before the last record instead of the first",
    )
    parser.add_argument(
        "-i",
        "--image-name",
        help="Frame capture pattern like out/frame-@.png (@ becomes 001, 002...)",
    )
    parser.add_argument(
        "-l",
        "--detail-level",
        type=int,
        help="Whether to draw links that are not routing-required",
    )
    parser.add_argument("--source", choices=["postgres", "jsonl"], help="Log backend")
    parser.add_argument("--log-file", help="JSON lines log for the jsonl source")
    parser.add_argument(
        "-u", "--dsn", help="libpq connection string of the log database"
    )
    parser.add_argument("-d", "--database", help="Database name holding the logs")
    parser.add_argument("-c", "--table", help="Table holding the logs")
    parser.add_argument(
        "--headless", action="store_true", default=None, help="Render without a window"
    )
    parser.add_argument(
        "--init-db", action="store_true", help="Create the log table and exit"
    )
    parser.add_argument(
        "--import-log",
        metavar="PATH",
        help="Load a JSON lines log into the log table and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sim-view", description="Replay simulator logs as topology frames"
    )
    sub = parser.add_subparsers(dest="projection", required=True)
    plane = sub.add_parser("plane", help="View data for plane")
    _add_common_args(plane)
    sphere = sub.add_parser("sphere", help="View data for sphere")
    _add_common_args(sphere)
    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Return the session configuration for parsed CLI ``args``.

    Defaults are overridden by the ``--config`` file, which is overridden by
    explicit flags.
    """

    cfg = Config()
    table_from_file = False
    if args.config:
        data = Config.read_file(args.config)
        cfg.update(data, base_dir=os.path.dirname(os.path.abspath(args.config)))
        table_from_file = "table" in data
    cfg.projection = args.projection
    if not table_from_file:
        cfg.table = DEFAULT_TABLES[args.projection]

    overrides: dict[str, Any] = {
        "follow": args.follow,
        "tail": args.tail,
        "image_name": args.image_name,
        "detail_level": args.detail_level,
        "source": args.source,
        "log_file": args.log_file,
        "dsn": args.dsn,
        "table": args.table,
        "headless": args.headless,
    }
    cfg.update({k: v for k, v in overrides.items() if v is not None})
    if args.database is not None:
        cfg.database["dbname"] = args.database
    if args.log_file and args.source is None:
        cfg.source = "jsonl"
    return cfg


@dataclass
class MainService:
    """Handle CLI parsing and run one playback session."""

    argv: Optional[List[str]] = None

    def run(self) -> int:
        args = build_parser().parse_args(self.argv)
        _configure_logging(logging.DEBUG if args.verbose else logging.INFO)
        cfg = build_config(args)
        try:
            if args.init_db:
                self._init_db(cfg)
                return 0
            if args.import_log:
                self._import_log(cfg, args.import_log)
                return 0
            self._play(cfg)
        except ViewerError as exc:
            logger.error("%s: %s", cfg.projection, exc)
            return 1
        return 0

    # ------------------------------------------------------------------
    @staticmethod
    def _init_db(cfg: Config) -> None:
        from Sim_View.database import initialize_log_table

        initialize_log_table(cfg.database, cfg.table, dsn=cfg.dsn)
        logger.info("log table %s ready", cfg.table)

    @staticmethod
    def _import_log(cfg: Config, path: str) -> None:
        from Sim_View.database import load_rows
        from Sim_View.database.file_source import iter_json

        load_rows(cfg.database, iter_json(path), cfg.table, dsn=cfg.dsn)

    @staticmethod
    def _play(cfg: Config) -> None:
        from Sim_View.database import open_log_source
        from Sim_View.engine.playback import PlaybackDriver
        from Sim_View.render import MatplotlibRenderer, make_drawer

        drawer = make_drawer(cfg.projection, cfg.detail_level)
        with open_log_source(cfg) as source, MatplotlibRenderer(
            cfg.image_name,
            size=cfg.window_size,
            extent=cfg.view_extent,
            headless=cfg.headless,
        ) as renderer:
            PlaybackDriver(cfg, source, renderer, drawer).run()


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point for ``sim-view``."""
    return MainService(argv=argv).run()


if __name__ == "__main__":  # pragma: no cover - CLI convenience
    sys.exit(main())
