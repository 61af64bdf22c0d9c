import copy
import logging
from pathlib import Path
from typing import Dict, Any, Optional
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).parent / "configs"

DEFAULT_CONFIG: Dict[str, Any] = {
    'main_database_path': "data/sqllearning.duckdb",
    'schema_directory': str(Path(__file__).parent.parent / "schemas"),
    'main_schema_script': "main_schema",
    'practice_schema_script': "practice_schema",
    'practice_seed_script': "practice_seed",
    'sentinel_table': "user_progress",
    'query_timeout_seconds': 30,
    'max_result_rows': 1000,
    'interrupt_grace_seconds': 2.0,
    'practice_external_access': False,
    'duckdb_settings': {},
}


class ConfigurationManager:

    def __init__(self, config_dir: Optional[str] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        if not self.config_dir.exists():
            raise FileNotFoundError(f"Config directory {self.config_dir} does not exist")

    def load_database_config(self, config_name: str = "practice.yaml") -> Dict[str, Any]:
        """Load a YAML config file and merge it over DEFAULT_CONFIG."""
        config_path = self.config_dir / config_name
        if not config_path.exists():
            raise FileNotFoundError(f"Config file {config_path} does not exist")
        try:
            with open(config_path, "r") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"YAML parsing error in {config_path}: {e}") from e
        except OSError as e:
            raise RuntimeError(f"Failed to load config file {config_path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping, got {type(loaded).__name__}")

        logger.debug(f"Loaded configuration from {config_path}")
        return merge_config(loaded)


def merge_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    config = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in (overrides or {}).items():
        if key not in DEFAULT_CONFIG:
            logger.warning(f"Ignoring unknown configuration key: {key}")
            continue
        config[key] = value
    return config
