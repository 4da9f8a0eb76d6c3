import os
from pathlib import Path

import numpy as np
import yaml

# Project structure configuration
PACKAGE_DIR = Path(__file__).parent
PROJECT_ROOT = PACKAGE_DIR.parent.parent
CONFIG_DIR = PACKAGE_DIR / "settings"
DATA_DIR = PROJECT_ROOT / "data"

SETTINGS_FILE = CONFIG_DIR / "liar_settings.yaml"

# Load LIAR settings
with open(SETTINGS_FILE) as f:
    LIAR_SETTINGS = yaml.safe_load(f)

# Coefficient dataset
DATASET_SETTINGS = LIAR_SETTINGS['dataset']
DATASET_FILENAME = DATASET_SETTINGS['filename']
DATASET_ENV_VAR = DATASET_SETTINGS['env_var']
DATASET_KEYS = DATASET_SETTINGS['keys']

# Region partition
ATLANTIC_ARCTIC_POLYGONS = tuple(LIAR_SETTINGS['regions']['atlantic_arctic'])

# Interpolation geometry
DEPTH_TO_DEGREE_CONVERSION = float(LIAR_SETTINGS['interpolation']['depth_to_degree_conversion'])
CORNER_MAGNITUDE = float(LIAR_SETTINGS['interpolation']['corner_magnitude'])

# Uncertainty settings
BASELINE_UNCERTAINTY = float(LIAR_SETTINGS['uncertainty']['baseline'])
DEFAULT_UNCERTAINTIES = np.array(
    list(LIAR_SETTINGS['uncertainty']['defaults'].values()), dtype=float
)
DEFAULT_UNCERTAINTIES.setflags(write=False)

SENTINEL_VALUES = tuple(float(v) for v in LIAR_SETTINGS['sentinels'])


def default_dataset_path() -> Path:
    """
    Resolve the coefficient dataset location.

    The environment variable named in the settings file takes precedence
    over the project data directory.

    Returns:
        Path to the dataset file (which may not exist)
    """
    override = os.environ.get(DATASET_ENV_VAR)
    if override:
        return Path(override)
    return DATA_DIR / DATASET_FILENAME
