"""
Configuration loader for the window manager server
Loads and validates configuration from YAML files
"""

import yaml
import logging
from typing import Dict, Any, List
from pathlib import Path
from datetime import datetime
import pytz

logger = logging.getLogger(__name__)

DEFAULT_PORTS: List[int] = [80, 443, 8080, 3000, 5000, 8000, 8888]
VALID_LAYOUTS = ("1", "2", "4")

def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file with validation
    """
    try:
        config_file = Path(config_path)
        if not config_file.exists():
            logger.error(f"Configuration file not found: {config_path}")
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}

        # Defaults first so partial sections validate against complete values
        config = _apply_defaults(config)
        _validate_config(config)

        logger.info(f"Configuration loaded from {config_path}")
        return config

    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

def _validate_config(config: Dict) -> None:
    """Validate configuration values"""
    discovery = config['discovery']

    ports = discovery['ports']
    if not isinstance(ports, list) or not ports:
        raise ValueError("discovery.ports is required and must not be empty")
    for port in ports:
        if not isinstance(port, int) or isinstance(port, bool) or not 1 <= port <= 65535:
            raise ValueError(f"Invalid port in discovery.ports: {port!r}")
    if len(set(ports)) != len(ports):
        raise ValueError("discovery.ports must not contain duplicates")

    host_range = discovery['host_range']
    if (not isinstance(host_range, list) or len(host_range) != 2
            or not all(isinstance(v, int) for v in host_range)):
        raise ValueError("discovery.host_range must be a list of two integers")
    start, end = host_range
    if not 1 <= start <= end <= 254:
        raise ValueError(f"discovery.host_range out of bounds: {host_range}")

    max_probes = discovery['max_concurrent_probes']
    if not isinstance(max_probes, int) or isinstance(max_probes, bool) or max_probes < 0:
        raise ValueError("discovery.max_concurrent_probes must be an integer >= 0")

    _require_positive(discovery, 'discovery', ['probe_timeout_ms', 'ip_lookup_timeout_seconds'])
    _require_positive(config['connectivity'], 'connectivity',
                      ['interval_ms', 'handshake_timeout_ms', 'fallback_timeout_ms'])

    layout = str(config['workspace']['default_layout'])
    if layout not in VALID_LAYOUTS:
        raise ValueError(f"workspace.default_layout must be one of {list(VALID_LAYOUTS)}")
    config['workspace']['default_layout'] = layout

    tz_name = config['logging']['timezone']
    try:
        pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown logging.timezone: {tz_name}")

def _require_positive(section: Dict, name: str, keys: List[str]) -> None:
    for key in keys:
        value = section[key]
        if not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"{name}.{key} must be a positive number")

def _apply_section_defaults(config: Dict, section: str, defaults: Dict) -> None:
    if config.get(section) is None:
        config[section] = {}
    for key, default_value in defaults.items():
        if key not in config[section]:
            config[section][key] = default_value

def _apply_defaults(config: Dict) -> Dict:
    """Apply default values to configuration"""

    # Discovery defaults
    _apply_section_defaults(config, 'discovery', {
        'ip_lookup_url': 'https://api.ipify.org?format=json',
        'ip_lookup_timeout_seconds': 5,
        'ports': list(DEFAULT_PORTS),
        'host_range': [1, 254],
        'probe_timeout_ms': 1000,
        'max_concurrent_probes': 256
    })

    # Connectivity prober defaults
    _apply_section_defaults(config, 'connectivity', {
        'interval_ms': 2000,
        'handshake_timeout_ms': 2000,
        'fallback_timeout_ms': 5000
    })

    _apply_section_defaults(config, 'workspace', {
        'default_layout': '4'
    })

    _apply_section_defaults(config, 'bookmarks', {
        'file': 'data/bookmarks.json',
        'storage_key': 'bookmarks'
    })

    # API defaults
    _apply_section_defaults(config, 'api', {
        'host': '0.0.0.0',
        'port': 8000,
        'cors_origins': ['*']
    })

    # Logging defaults
    _apply_section_defaults(config, 'logging', {
        'level': 'INFO',
        'file': 'logs/window_manager.log',
        'console_output': True,
        'timezone': 'UTC'
    })

    return config


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders record timestamps in a configured timezone"""

    def __init__(self, fmt=None, tz_name: str = 'UTC'):
        super().__init__(fmt)
        self.tz = pytz.timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            # Default format: YYYY-MM-DD HH:MM:SS TZ
            return dt.strftime('%Y-%m-%d %H:%M:%S %Z')

def setup_logging(config: Dict) -> None:
    """Setup logging based on configuration"""
    log_config = config.get('logging', {})
    level = log_config.get('level', 'INFO')
    tz_name = log_config.get('timezone', 'UTC')

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = TimezoneFormatter(log_format, tz_name)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))

    # Replace handlers installed by a previous call
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    log_file = log_config.get('file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    logger.info(f"Logging configured: level={level}, tz={tz_name}, "
                f"console={log_config.get('console_output', True)}, file={log_file}")

def get_sample_config() -> Dict:
    """Return a sample configuration for reference"""
    return {
        "discovery": {
            "ip_lookup_url": "https://api.ipify.org?format=json",
            "ip_lookup_timeout_seconds": 5,
            "ports": list(DEFAULT_PORTS),
            "host_range": [1, 254],
            "probe_timeout_ms": 1000,
            "max_concurrent_probes": 256
        },
        "connectivity": {
            "interval_ms": 2000,
            "handshake_timeout_ms": 2000,
            "fallback_timeout_ms": 5000
        },
        "workspace": {
            "default_layout": "4"
        },
        "bookmarks": {
            "file": "data/bookmarks.json",
            "storage_key": "bookmarks"
        },
        "api": {
            "host": "0.0.0.0",
            "port": 8000,
            "cors_origins": ["*"]
        },
        "logging": {
            "level": "INFO",
            "file": "logs/window_manager.log",
            "console_output": True,
            "timezone": "UTC"
        }
    }
