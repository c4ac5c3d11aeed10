"""Numerical tolerances and runtime settings for the transforms."""

import os

# Cartesian -> lat/lon iterates until successive latitudes differ by less
# than this many metres (divided by the semi-major axis).
CART_TO_LAT_LON_PRECISION = 4.0

# Upper bound on N - N0 - M (m) when inverting the meridional arc. 0.1mm is
# the value suggested by "A guide to coordinate systems in Great Britain".
EAS_NOR_TO_LAT_LON_PRECISION = 0.00001

# Neither iteration needs more than ~10 steps for points on the Earth.
MAX_ITERATIONS = 100

# Side of a lettered grid square (m)
GRID_SQUARE_SIZE = 100000.0

# Logging (command line only)
LOG_LEVEL = os.getenv("COORD_TOOL_LOG_LEVEL", "WARNING").upper()
