"""Geodetic transformations between GPS coordinates and the Ordnance Survey
national grids of Great Britain and Ireland."""

from .geo import *
from .grid import *
from .tool import *
