import yaml

from pathlib import Path
from typing import Any

DAY_IN_SECONDS = 86400


def load_config(config_path: str = 'config.yaml', subconfig: str | None = None) -> dict[str, Any]:
   """
   Load configuration from YAML file.

   Args:
      config_path: Path to config.yaml file.
      subconfig: Optional top level section to return.

   Returns:
      Configuration (or the requested section) as a dictionary.
   """
   try:
      config_file = Path(config_path)
      if not config_file.exists():
         raise FileNotFoundError(f"config.yaml not found at: {config_path}")

      with open(config_file, 'r', encoding='utf-8') as f:
         config = yaml.safe_load(f) or {}

      if subconfig is None:
         return config
      if subconfig in config:
         return config[subconfig] or {}
      raise KeyError(f"Section '{subconfig}' not found in config.yaml")

   except Exception as e:
      raise RuntimeError(f"Failed to load config.yaml: {e}")


def is_email(value: str) -> bool:
   at_pos = value.find('@')
   dot_pos = value.rfind('.')

   return at_pos > 0 and dot_pos > at_pos + 1
