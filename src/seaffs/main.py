"""
Main entry point: mount every repository in a data directory, read-only.
"""
import argparse
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

from seafobj import ConfigError, SeafileSession, SessionError

from . import __version__
from .config import Config, load_config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = "~/.ccnet"
CONFIG_DIR_ENV = "CCNET_CONF_DIR"
DATA_SUBDIR = "seafile"
LOG_NAME = "seaf-fuse.log"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOG_HANDLER = "seaf-fuse"

DEBUG_ENV = "SEAFILE_DEBUG"
DEBUG_LOGGERS = {
    "fuse": ["fuse", "seaffs"],
    "store": ["seafobj", "sqlalchemy.engine"],
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seaf-fuse",
        usage="%(prog)s [-c config_dir] [-d seafile_dir] mountpoint [fuse options]",
        description="Mount seafile repositories as a read-only filesystem.",
        allow_abbrev=False,
    )
    parser.add_argument("-c", "--config", help="configuration directory "
                        f"(default: ${CONFIG_DIR_ENV} or {DEFAULT_CONFIG_DIR})")
    parser.add_argument("-d", "--seafdir", help="seafile data directory "
                        f"(default: <config>/{DATA_SUBDIR})")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_fuse_args(args: List[str]) -> Tuple[str, Dict[str, Any]]:
    """
    Turn the arguments left over after our own options into a mountpoint and
    keyword arguments for FUSE: -f, -s and -o opt[=val],...
    """
    mountpoint = None
    kwargs: Dict[str, Any] = {}
    it = iter(args)
    for arg in it:
        if arg == "-f":
            kwargs["foreground"] = True
        elif arg == "-s":
            kwargs["nothreads"] = True
        elif arg.startswith("-o"):
            opts = arg[2:] or next(it, None)
            if not opts:
                raise ValueError("-o requires an argument")
            for opt in opts.split(","):
                if not opt:
                    continue
                key, eq, value = opt.partition("=")
                kwargs[key] = value if eq else True
        elif arg.startswith("-"):
            raise ValueError(f"unrecognized option {arg}")
        elif mountpoint is None:
            mountpoint = arg
        else:
            raise ValueError(f"unexpected argument {arg}")
    if mountpoint is None:
        raise ValueError("missing mountpoint")
    return mountpoint, kwargs


def setup_logging(config: Config, seaf_dir: str, debug_flags: Optional[str]) -> None:
    log_file = config.log_file or os.path.join(seaf_dir, LOG_NAME)
    level = logging.getLevelName(config.log_level.upper())
    handler = logging.StreamHandler() if log_file == "-" else logging.FileHandler(log_file)
    handler.set_name(LOG_HANDLER)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)

    for flag in (debug_flags or "").split(","):
        flag = flag.strip().lower()
        if not flag:
            continue
        if flag == "all":
            names = [name for group in DEBUG_LOGGERS.values() for name in group]
        elif flag in DEBUG_LOGGERS:
            names = DEBUG_LOGGERS[flag]
        else:
            logger.warning("Unknown debug flag %s", flag)
            continue
        for name in names:
            logging.getLogger(name).setLevel(logging.DEBUG)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args, rest = parser.parse_known_args(argv)
    try:
        mountpoint, fuse_kwargs = parse_fuse_args(rest)
    except ValueError as e:
        parser.error(str(e))

    config_dir = os.path.expanduser(args.config or os.environ.get(CONFIG_DIR_ENV, DEFAULT_CONFIG_DIR))
    seaf_dir = os.path.expanduser(args.seafdir) if args.seafdir else os.path.join(config_dir, DATA_SUBDIR)

    try:
        config = load_config(config_dir)
    except ConfigError as e:
        print(f"Read config dir error: {e}", file=sys.stderr)
        return 1

    try:
        setup_logging(config, seaf_dir, os.environ.get(DEBUG_ENV))
    except OSError as e:
        print(f"Failed to init log: {e}", file=sys.stderr)
        return 1

    session = SeafileSession(seaf_dir, config.database_url, config.pool_size, config.verify_blocks)
    with session:
        try:
            session.init()
        except SessionError as e:
            logger.error("Failed to init seafile session: %s", e)
            return 1
        try:
            session.connect_pool()
        except SessionError as e:
            logger.error("Failed to create connection pool: %s", e)
            return 1

        # libfuse is only loaded once everything else is in place.
        from .fuse_interface import mount
        logger.info("Mounting %s at %s", seaf_dir, mountpoint)
        mount(session, mountpoint, **fuse_kwargs)
    return 0


if __name__ == "__main__":
    sys.exit(main())
