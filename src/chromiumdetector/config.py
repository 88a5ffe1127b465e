from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import os
import yaml
import logging

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_DIRS = ["/Applications", "~/Applications"]

KNOWN_FRAMEWORKS = (
    "Electron Framework.framework",
    "Chromium Embedded Framework.framework",
    "nwjs Framework.framework",
    "MiniBlink.framework",
    "libcef.dylib",
    "Chrome Framework.framework",
    "Brave Framework.framework",
    "Microsoft Edge Framework.framework",
    "Opera Framework.framework",
)

BINARY_PATTERNS = (
    "libchromium",
    "libcef",
    "Chrome Framework",
    "Electron Framework",
)

KNOWN_BUNDLE_ID_PREFIXES = (
    "com.google.Chrome",
    "com.microsoft.edgemac",
    "com.brave.Browser",
    "com.operasoftware.Opera",
    "org.chromium.Chromium",
    "com.electron.",
)

BACKENDS = ("auto", "otool", "macho")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DetectionRules:
    frameworks: Tuple[str, ...] = KNOWN_FRAMEWORKS
    binary_patterns: Tuple[str, ...] = BINARY_PATTERNS
    bundle_id_prefixes: Tuple[str, ...] = KNOWN_BUNDLE_ID_PREFIXES


@dataclass
class InspectorConfig:
    backend: str = "auto"
    tool: str = "otool"
    timeout_seconds: float = 30.0
    max_concurrent: int = 4


@dataclass
class Config:
    search_dirs: List[str]
    max_workers: int
    size_max_depth: int
    inspector: InspectorConfig
    detection: DetectionRules
    logging: Dict[str, Any] = field(default_factory=lambda: {"level": "WARNING"})


def _expand(dirs: List[str]) -> List[str]:
    return [os.path.expanduser(str(d)) for d in dirs]


def _names(section: Dict[str, Any], key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"detection.{key} must be a list of strings")
    return tuple(value)


def _positive_int(value: Any, key: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if number < 1:
        raise ConfigError(f"{key} must be at least 1, got {number}")
    return number


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping, got {value!r}")
    return value


def build_config(data: Optional[Dict[str, Any]]) -> Config:
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError("configuration document must be a mapping")

    i = _section(data, "inspector")
    backend = i.get("backend", "auto")
    if backend not in BACKENDS:
        raise ConfigError(f"inspector.backend must be one of {', '.join(BACKENDS)}, got {backend!r}")
    try:
        timeout = float(i.get("timeout_seconds", 30))
    except (TypeError, ValueError):
        raise ConfigError(f"inspector.timeout_seconds must be a number, got {i.get('timeout_seconds')!r}")
    if timeout <= 0:
        raise ConfigError(f"inspector.timeout_seconds must be positive, got {timeout:g}")
    inspector = InspectorConfig(
        backend=backend,
        tool=str(i.get("tool", "otool")),
        timeout_seconds=timeout,
        max_concurrent=_positive_int(i.get("max_concurrent", 4), "inspector.max_concurrent"),
    )

    d = _section(data, "detection")
    detection = DetectionRules(
        frameworks=_names(d, "frameworks", KNOWN_FRAMEWORKS),
        binary_patterns=_names(d, "binary_patterns", BINARY_PATTERNS),
        bundle_id_prefixes=_names(d, "bundle_id_prefixes", KNOWN_BUNDLE_ID_PREFIXES),
    )

    search_dirs = data.get("search_dirs", DEFAULT_SEARCH_DIRS)
    if search_dirs is None:
        search_dirs = []
    if not isinstance(search_dirs, list):
        raise ConfigError("search_dirs must be a list of paths")

    log_settings = _section(data, "logging") or {"level": "WARNING"}
    if not isinstance(log_settings.get("level", "WARNING"), str):
        raise ConfigError(f"logging.level must be a level name, got {log_settings.get('level')!r}")

    return Config(
        search_dirs=_expand(search_dirs),
        max_workers=_positive_int(data.get("max_workers", 1), "max_workers"),
        size_max_depth=_positive_int(data.get("size_max_depth", 64), "size_max_depth"),
        inspector=inspector,
        detection=detection,
        logging=log_settings,
    )


def load_config(path: Optional[str] = None) -> Config:
    """Load a YAML config file; with no path, return the built-in defaults."""
    if path is None:
        return build_config({})
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}")
    logger.debug("Loaded config from %s", path)
    return build_config(data)
