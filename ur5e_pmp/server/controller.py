"""
Main entry for the UR5e PMP planning server.
"""

import argparse
import logging
import os
from dataclasses import dataclass

import uvicorn

from ur5e_pmp import config as pmp_config
from ur5e_pmp.config import LOG_LEVEL_DEFAULT, PLANNER_WORKERS, SERVER_IP, SERVER_PORT, TRACE
from ur5e_pmp.server.app import create_app

logger = logging.getLogger("ur5e_pmp.server.controller")


@dataclass
class ServerConfig:
    """Configuration for the planning server."""
    host: str = SERVER_IP
    port: int = SERVER_PORT
    workers: int = PLANNER_WORKERS
    log_level: int = logging.INFO


def resolve_log_level(args: argparse.Namespace) -> int:
    """Map --log-level / -v / -q to a logging level; UR5E_PMP_TRACE applies when no flag is given."""
    if args.log_level:
        if args.log_level == 'TRACE':
            return TRACE
        return getattr(logging, args.log_level)
    if args.verbose >= 3:
        return TRACE
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.WARNING
    if pmp_config.TRACE_ENABLED:
        return TRACE
    return getattr(logging, LOG_LEVEL_DEFAULT, logging.INFO) if LOG_LEVEL_DEFAULT != 'TRACE' else TRACE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='UR5e PMP minimum-jerk planning server')
    parser.add_argument('--host', default=SERVER_IP, help='HTTP bind address')
    parser.add_argument('--port', type=int, default=SERVER_PORT, help='HTTP port')
    parser.add_argument('--workers', type=int, default=PLANNER_WORKERS,
                        help='Threads for per-joint coefficient solves (0 = serial)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Enable quiet logging (WARNING level)')
    parser.add_argument('--log-level', choices=['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Set specific log level')
    return parser


def parse_config(argv=None) -> ServerConfig:
    args = build_parser().parse_args(argv)
    return ServerConfig(
        host=args.host,
        port=args.port,
        workers=max(0, args.workers),
        log_level=resolve_log_level(args),
    )


def main(argv=None) -> int:
    """Main entry point for the server."""
    config = parse_config(argv)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    logger.info(f"Planner bind: host={config.host} port={config.port} workers={config.workers} pid={os.getpid()}")
    app = create_app(max_workers=config.workers)
    try:
        uvicorn.run(app, host=config.host, port=config.port, log_config=None,
                    log_level=logging.getLevelName(max(config.log_level, logging.DEBUG)).lower())
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except OSError as e:
        logger.error(f"Failed to start server: {e}")
        return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
