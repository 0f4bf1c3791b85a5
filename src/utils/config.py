"""Configuration loader.

Reads road catalog and generator settings from YAML files.  The
default configuration lives in ``configs/road.yaml`` at the project
root; it describes the same road as
:func:`src.roadmesh.sections.generate_sections`.
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "road.yaml"


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML configuration file into a dictionary.

    Parameters
    ----------
    path : str or Path
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.  Returns an empty dict if the
        file does not exist or is empty.

    Raises
    ------
    ValueError
        If the document does not contain a mapping at the top level.
    yaml.YAMLError
        If the file is not valid YAML.
    """
    cfg_path = Path(path)
    if not cfg_path.is_file():
        return {}
    with open(cfg_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{cfg_path}: expected a mapping at the top level")
    return data
