"""Control-point grid surfaces and the B-spline kernel behind them."""
from .grid import GridSnapshot, SurfaceGrid

__all__ = [
    'GridSnapshot',
    'SurfaceGrid',
]
