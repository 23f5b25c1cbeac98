# utils/config.py
import os

# Where we persist small bot settings
SETTINGS_PATH = os.environ.get("MAPBOT_SETTINGS", "data/settings.json")

# Default settings used on first run
DEFAULT_SETTINGS = {
    "font_path": None,          # TrueType file for the map legend (required)
    "image_dir": "data/maps",   # one <channel id>.png per channel
    "command_prefix": ".",      # ".addc", ".mvc", ...
    "grid_width": 32,           # pixels per cell
    "grid_height": 32,
}

# Size of the map the console starts with
REPL_INITIAL_SIZE = (10, 10)
