# FILE: config.py
"""Central configuration file for the AGV route-planning domain model."""

# --- Resource Documents ---
MAP_FILE_PATH = "resources/map.xml"
VEHICLE_FILE_PATH = "resources/AGVfactsheet.json"
TASKS_FILE_PATH = "resources/input.json"

# --- Conflict Model ---
# Every agent is a disk of this radius, whatever its declared width/length.
AGENT_CONTACT_RADIUS = 0.4

# --- Search Interface ---
TIME_EPSILON = 1e-6

# --- Layout Import ---
DECLARED_LENGTH_TOLERANCE = 1e-3  # relative difference before we report an override
