"""
Configuration file support for the summarizedexperiment CLI.

Supports YAML and JSON config files with CLI argument override. A subset
config mirrors the command's flags:

```yaml
input: data/raw
output: data/filtered
rows: [FEATURE_1, FEATURE_7]       # or "FEATURE_1,FEATURE_7"
column_positions: "0:4"            # or [0, 2, 3]
```

Quote start:stop ranges in YAML: an unquoted ``1:5`` is read as the
base-60 integer 65.
"""

import json
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# Config keys accepted by each subcommand, mapped to argparse dest names
SUBSET_KEYS = {
    'input': 'input',
    'output': 'output',
    'rows': 'rows',
    'columns': 'columns',
    'row_positions': 'row_positions',
    'column_positions': 'column_positions',
}

_PATH_KEYS = {'input', 'output'}


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters:
        config_path: Path to config file (.yaml, .yml, or .json)

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported or invalid

    Examples:
        >>> config = load_config(Path("subset.yaml"))
        >>> config['rows']
        ['FEATURE_1', 'FEATURE_7']
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    if suffix not in ('.yaml', '.yml', '.json'):
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .yaml, .yml, or .json"
        )

    try:
        with open(config_path, 'r') as f:
            if suffix == '.json':
                config = json.load(f)
            else:
                config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ValueError("Config file must contain a dictionary/mapping at top level")

    return config


def explicit_arg_names(cli_args: Optional[List[str]]) -> set:
    """
    Argparse dest names of the long options present in a raw argv list.

    ``--row-positions 0:5`` and ``--row-positions=0:5`` both yield
    ``row_positions``; short options map through their long form.
    """
    short_to_long = {
        'i': 'input',
        'o': 'output',
        'c': 'config',
    }
    explicit = set()
    for arg in cli_args or []:
        if arg.startswith('--'):
            explicit.add(arg[2:].split('=', 1)[0].replace('-', '_'))
        elif arg.startswith('-') and len(arg) == 2 and arg[1] in short_to_long:
            explicit.add(short_to_long[arg[1]])
    return explicit


def _merge_value(cli_value: Any, config_value: Any, was_explicitly_set: bool) -> Any:
    """
    Merge a single config value with CLI argument.

    Rules:
    - CLI args ALWAYS override config if explicitly set
    - If CLI arg not set, use config value
    - If neither set, keep CLI default
    """
    if was_explicitly_set:
        return cli_value

    if config_value is not None:
        return config_value

    return cli_value


def merge_config_with_args(
    config: Dict[str, Any],
    args: Namespace,
    cli_args: Optional[List[str]] = None,
    keys: Dict[str, str] = SUBSET_KEYS,
) -> Namespace:
    """
    Merge config file values with CLI arguments.

    Priority (highest to lowest):
    1. Explicitly provided CLI arguments
    2. Config file values
    3. CLI argument defaults

    Parameters:
        config: Configuration dictionary from load_config()
        args: Parsed CLI arguments (argparse.Namespace)
        cli_args: Raw CLI arguments list (for detecting explicit values).
                  If None, assumes all args are defaults
        keys: Config key to argparse dest mapping

    Returns:
        New Namespace with merged values (``args`` is not modified)

    Raises:
        ValueError: If the config contains keys the command does not accept
    """
    unknown = sorted(set(config) - set(keys))
    if unknown:
        raise ValueError(
            f"Unknown config keys: {', '.join(unknown)}. "
            f"Valid keys: {', '.join(sorted(keys))}"
        )

    explicit_args = explicit_arg_names(cli_args)
    merged = Namespace(**vars(args))

    for config_key, arg_name in keys.items():
        if config_key not in config:
            continue
        config_value = config[config_key]
        if config_value is not None and config_key in _PATH_KEYS:
            config_value = Path(config_value)
        setattr(merged, arg_name, _merge_value(
            getattr(merged, arg_name, None),
            config_value,
            arg_name in explicit_args,
        ))

    return merged
