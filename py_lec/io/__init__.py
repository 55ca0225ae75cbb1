"""
Site input collaborators.
"""

from .geojson import read_boundary_sites, read_point_sites, read_sites
from .sites import random_sites

__all__ = ['read_boundary_sites', 'read_point_sites', 'read_sites', 'random_sites']
