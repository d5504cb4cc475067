import os

from dotenv import find_dotenv, load_dotenv

from budget_categorizer.logger import get_logger

logger = get_logger(__name__)


CONFIG_FILENAME = "config.yaml"

_CONFIG_FILE_PATH: str | None = None

_CONFIG_KEYS = (
    "LOG_LEVEL",
    "LOG_DIR",
    "DATA_DIR",
    "KEYWORD_RULES_FILE",
    "OVERRIDE_STORE",
    "BATCH_CONCURRENCY",
    "BATCH_TIMEOUT",
)

OVERRIDE_STORE_CHOICES = ("json", "memory")
DEFAULT_BATCH_CONCURRENCY = 8


def _resolve_dotenv_path() -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        candidate = os.path.join(config_dir, ".env")
        if os.path.exists(candidate):
            return candidate
    return find_dotenv(usecwd=True) or None


def _resolve_config_path() -> str:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        return os.path.join(config_dir, CONFIG_FILENAME)
    candidate = os.path.join(os.getcwd(), "config", CONFIG_FILENAME)
    if os.path.exists(candidate):
        return candidate
    return os.path.join(os.getcwd(), CONFIG_FILENAME)


def _strip_inline_comment(raw_value: str) -> str:
    in_single = False
    in_double = False
    escaped = False
    for index, char in enumerate(raw_value):
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char == '"' and not in_single:
            in_double = not in_double
            continue
        if char == "'" and not in_double:
            in_single = not in_single
            continue
        if char == "#" and not in_single and not in_double:
            return raw_value[:index].rstrip()
    return raw_value


def _unquote_value(raw_value: str) -> str:
    if len(raw_value) < 2:
        return raw_value
    if raw_value[0] == raw_value[-1] == '"':
        value = raw_value[1:-1]
        return value.replace('\\"', '"').replace("\\\\", "\\")
    if raw_value[0] == raw_value[-1] == "'":
        value = raw_value[1:-1]
        return value.replace("\\'", "'").replace("\\\\", "\\")
    return raw_value


def read_config_file(path: str | None) -> dict[str, str]:
    """Read flat `KEY: value` lines; blank values and comments are skipped."""
    if not path or not os.path.exists(path):
        return {}

    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            key = key.strip()
            if not key:
                continue
            cleaned = _strip_inline_comment(raw_value).strip()
            if not cleaned:
                continue
            value = _unquote_value(cleaned)
            if value:
                values[key] = value
    return values


def load_environment() -> None:
    """Real environment wins over .env, which wins over config.yaml."""
    global _CONFIG_FILE_PATH

    dotenv_path = _resolve_dotenv_path()
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)

    _CONFIG_FILE_PATH = _resolve_config_path()
    file_values = read_config_file(_CONFIG_FILE_PATH)
    for key in _CONFIG_KEYS:
        if key not in os.environ and key in file_values:
            os.environ[key] = file_values[key]


def get_config_path() -> str | None:
    return _CONFIG_FILE_PATH


def ensure_dirs(*paths: str | None) -> None:
    for path in paths:
        if path and path not in {".", "./"}:
            os.makedirs(path, exist_ok=True)


def get_env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def get_env_float(name: str, default: float = 0.0) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default


def get_env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw not in choices:
        logger.warning(
            "[ENV] %s='%s' not one of %s, using default %s.",
            name,
            raw,
            ", ".join(choices),
            default,
        )
        return default
    return raw


def log_environment() -> None:
    logger.info("[ENV] Config file: %s", get_config_path() or "<none>")
    for key in _CONFIG_KEYS:
        value = os.getenv(key)
        logger.info("[ENV] %s=%s", key, "<unset>" if value is None else value)


load_environment()

DATA_DIR = os.getenv("DATA_DIR", ".")
LOG_DIR = os.getenv("LOG_DIR")
CONFIG_DIR = os.getenv("CONFIG_DIR")

ensure_dirs(DATA_DIR, LOG_DIR, CONFIG_DIR)

KEYWORD_RULES_FILE = os.getenv("KEYWORD_RULES_FILE") or None
OVERRIDE_STORE = get_env_choice("OVERRIDE_STORE", OVERRIDE_STORE_CHOICES, "json")
BATCH_CONCURRENCY = get_env_int(
    "BATCH_CONCURRENCY",
    DEFAULT_BATCH_CONCURRENCY,
    min_value=1,
)
# Seconds per transaction, 0 disables
BATCH_TIMEOUT = get_env_float("BATCH_TIMEOUT", 0.0)
