"""Read-model file names and schemas.

Tunable values (geometry, interaction, paths) live in
:class:`app_config.settings.Settings` and are read at call time through
``get_settings()``; this module only holds fixed constants.
"""

# Read-model file names, relative to Settings.data_root
LOADINGS_FILE = "loadings.csv"
CALENDAR_FILE = "calendar_exceptions.csv"
CAPACITY_FILE = "capacity.csv"

# Read-model schema - required columns per file
REQUIRED_LOADING_COLUMNS = ["id", "employee_id", "section_id", "start", "end", "rate"]
REQUIRED_CALENDAR_COLUMNS = ["date", "kind"]
REQUIRED_CAPACITY_COLUMNS = ["section_id", "capacity"]
