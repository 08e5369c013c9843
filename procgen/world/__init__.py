"""Ready-made schema trees built on procgen."""

from .universe import build_universe, density_grid

__all__ = ["build_universe", "density_grid"]
