"""
Configuration & path management.

Central place for file paths and global constants shared by the store,
the CLI and the web app.
"""

import os
from pathlib import Path

from .core.network import INPUT_MAX, INPUT_MIN

# layernet/ sits directly below the project root
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

# Saved networks live here unless LAYERNET_DATA_DIR points elsewhere
DATA_PATH: Path = Path(os.environ.get('LAYERNET_DATA_DIR', PROJECT_ROOT / 'data'))

INPUT_RANGE = (INPUT_MIN, INPUT_MAX)
DEFAULT_LEARNING_RATE = 0.5
DEFAULT_EPOCHS = 1000
