"""Configuration: rotation options from YAML, env vars and CLI, and the
immutable per-directory policy derived from them."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

ROLLING_POLICY_SIZE = "size"
ROLLING_POLICY_DAILY = "daily"
ROLLING_POLICIES = (ROLLING_POLICY_SIZE, ROLLING_POLICY_DAILY)

LOG_ROTATE_SIZE = 10       # MB
LOG_BACKUP_COUNT = 7
LOG_ROTATE_DATE = 1        # days

SIZE_CHECK_CYCLE = 30.0    # seconds
DAY_SECONDS = 24 * 60 * 60


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Options:
    logger_file: str = "./logs/app.log"
    rolling_policy: str = ROLLING_POLICY_SIZE
    log_rotate_size: float = LOG_ROTATE_SIZE
    log_backup_count: int = LOG_BACKUP_COUNT
    log_rotate_date: int = LOG_ROTATE_DATE
    recursive: bool = False


@dataclass(frozen=True)
class RotationPolicy:
    log_file_path: str
    log_file_dir: str
    policy: str = ROLLING_POLICY_SIZE
    size_mb: float = LOG_ROTATE_SIZE  # negative disables size rollover
    backup_count: int = LOG_BACKUP_COUNT  # negative keeps everything
    check_cycle: float = SIZE_CHECK_CYCLE
    rotate_date: int = 0
    recursive: bool = False

    @property
    def base_name(self) -> str:
        return os.path.basename(self.log_file_path)


def new_rotation_policy(options: Options) -> RotationPolicy:
    """Derive the rotation policy for one log file.

    Size mode polls every 30 seconds. Daily mode checks every
    ``log_rotate_date`` days and rolls over any non-empty file, so each cycle
    starts a fresh file. A zero backup count falls back to the default.
    """
    if options.rolling_policy not in ROLLING_POLICIES:
        raise ValueError(
            f"unknown rolling policy {options.rolling_policy!r}, "
            f"expected one of {', '.join(ROLLING_POLICIES)}"
        )
    if not options.logger_file:
        raise ValueError("logger_file must not be empty")

    log_file_path = os.path.abspath(options.logger_file)
    backup_count = options.log_backup_count
    if backup_count == 0:
        backup_count = LOG_BACKUP_COUNT

    if options.rolling_policy == ROLLING_POLICY_SIZE:
        size_mb = options.log_rotate_size if options.log_rotate_size > 0 else LOG_ROTATE_SIZE
        check_cycle = SIZE_CHECK_CYCLE
        rotate_date = 0
    else:
        size_mb = 0
        rotate_date = options.log_rotate_date if options.log_rotate_date > 1 else LOG_ROTATE_DATE
        check_cycle = float(DAY_SECONDS * rotate_date)

    return RotationPolicy(
        log_file_path=log_file_path,
        log_file_dir=os.path.dirname(log_file_path),
        policy=options.rolling_policy,
        size_mb=size_mb,
        backup_count=backup_count,
        check_cycle=check_cycle,
        rotate_date=rotate_date,
        recursive=options.recursive,
    )


def load_yaml_config(path: str | None) -> dict:
    """Load a YAML config file. Returns empty dict if no path or file is missing."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ValueError(f"Config file {path} is not valid YAML: {e}") from e


def load_options(cli_args=None, yaml_data: dict | None = None) -> Options:
    """Build Options from the YAML ``rotation`` section, env vars, then CLI flags.

    Later sources win. Raises ValueError on values that do not parse.
    """
    if yaml_data is not None and not isinstance(yaml_data, dict):
        raise ValueError("config file must contain a mapping")
    section = (yaml_data or {}).get("rotation") or {}
    if not isinstance(section, dict):
        raise ValueError("rotation section must be a mapping")

    def _value(cli_name, env_key, yaml_key, default):
        cli_value = getattr(cli_args, cli_name, None)
        if cli_value is not None:
            return cli_value
        if env_key in os.environ:
            return os.environ[env_key]
        return section.get(yaml_key, default)

    options = Options(
        logger_file=str(_value("log_file", "LOG_FILE", "log_file", Options.logger_file)),
        rolling_policy=str(
            _value("policy", "ROLLING_POLICY", "rolling_policy", Options.rolling_policy)
        ).strip().lower(),
        log_rotate_size=float(
            _value("size_mb", "LOG_ROTATE_SIZE", "log_rotate_size", Options.log_rotate_size)
        ),
        log_backup_count=int(
            _value("backup_count", "LOG_BACKUP_COUNT", "log_backup_count", Options.log_backup_count)
        ),
        log_rotate_date=int(
            _value("rotate_days", "LOG_ROTATE_DATE", "log_rotate_date", Options.log_rotate_date)
        ),
        recursive=_parse_bool(
            _value("recursive", "ROTATE_RECURSIVE", "recursive", Options.recursive)
        ),
    )
    if options.rolling_policy not in ROLLING_POLICIES:
        raise ValueError(f"unknown rolling policy {options.rolling_policy!r}")
    return options
