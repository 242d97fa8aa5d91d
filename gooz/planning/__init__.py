"""
Placement and pass planning.

Pure numeric helpers shared by the shape registry and the path generators.
"""

from gooz.planning.build_volume import fits
from gooz.planning.passes import nearest_index, pass_count

__all__ = ["fits", "nearest_index", "pass_count"]
