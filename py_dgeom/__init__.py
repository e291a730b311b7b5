"""
py_dgeom: separable Voronoi maps and distance transformations on integer grids.
"""

__version__ = "0.1.0"
