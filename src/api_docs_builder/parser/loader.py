"""Load endpoint data produced by the documentation scanner.

The scanner writes one YAML (or JSON) file per controller group. A
directory of such files becomes a ``{file_key: file_data}`` mapping; a
single file is expected to already hold that mapping.
"""

import logging
from pathlib import Path

import yaml

from api_docs_builder.errors import InputError

logger = logging.getLogger(__name__)

DATA_SUFFIXES = (".yaml", ".yml", ".json")


def read_data_file(file_path: Path):
    """Parse one YAML/JSON file. JSON is read through the YAML parser."""
    try:
        text = file_path.read_text(encoding="utf-8")
        return yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as e:
        raise InputError(f"Cannot parse {file_path}: {e}") from e


def load_endpoint_data(path: Path) -> dict:
    """Load scanner output from a directory of files or a single file."""
    if path.is_dir():
        data = {}
        for file_path in sorted(path.iterdir()):
            if not file_path.is_file() or file_path.name.startswith(".") or file_path.suffix not in DATA_SUFFIXES:
                logger.debug("Skipping %s", file_path)
                continue
            data[file_path.stem] = read_data_file(file_path)
        return data

    data = read_data_file(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InputError(f"{path} must contain a mapping of file keys to endpoint groups")
    return data


def load_ordered_items(path: Path):
    """Load a data file for ordered_data (a mapping or a list of records)."""
    data = read_data_file(path)
    return data if data is not None else []
