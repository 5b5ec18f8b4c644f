"""
Tensor-Product B-Spline Kernel

Clamped, non-rational B-splines over a rectangular control grid:
- Knot vector construction
- Basis matrices and surface evaluation (scipy BSpline)
- Exact refinement by Boehm knot insertion
- Least-squares refitting for coarser grids
"""
import numpy as np
from scipy.interpolate import BSpline
from typing import Optional, Tuple


def clamped_uniform_knots(count: int, degree: int) -> np.ndarray:
    """Clamped knot vector with uniformly spaced interior knots on [0, 1].

    Args:
        count: Number of control points
        degree: Polynomial degree

    Returns:
        Knot vector of length count + degree + 1
    """
    interior = np.linspace(0.0, 1.0, count - degree + 1)[1:-1]
    return np.concatenate([
        np.zeros(degree + 1),
        interior,
        np.ones(degree + 1),
    ])


def knot_domain(knots: np.ndarray, degree: int) -> Tuple[float, float]:
    """Parameter interval on which the spline is defined."""
    n = len(knots) - degree - 1
    return float(knots[degree]), float(knots[n])


def basis_matrix(knots: np.ndarray, degree: int, params: np.ndarray) -> np.ndarray:
    """Evaluate every basis function at every parameter.

    Args:
        knots: Knot vector
        degree: Polynomial degree
        params: Parameter values (M,)

    Returns:
        Basis values (M, N) where N is the number of control points
    """
    n = len(knots) - degree - 1
    # Identity coefficients make column i the i-th basis function
    spline = BSpline(knots, np.eye(n), degree)
    return spline(np.asarray(params, dtype=np.float64))


def evaluate_surface(
    points: np.ndarray,
    knots_u: np.ndarray,
    knots_v: np.ndarray,
    degree_u: int,
    degree_v: int,
    u_params: np.ndarray,
    v_params: np.ndarray
) -> np.ndarray:
    """Evaluate a tensor-product surface on a parameter grid.

    Args:
        points: Control points (Nu, Nv, 3)
        knots_u: Knot vector in u
        knots_v: Knot vector in v
        degree_u: Degree in u
        degree_v: Degree in v
        u_params: u parameters (Mu,)
        v_params: v parameters (Mv,)

    Returns:
        Surface points (Mu, Mv, 3)
    """
    bu = basis_matrix(knots_u, degree_u, u_params)
    bv = basis_matrix(knots_v, degree_v, v_params)
    return np.einsum('ai,ijk,bj->abk', bu, points, bv)


def insert_knot(
    knots: np.ndarray,
    ctrl: np.ndarray,
    degree: int,
    t: float
) -> Tuple[np.ndarray, np.ndarray]:
    """Insert one knot (Boehm's algorithm) along axis 0 of ctrl.

    The curve (or every curve of a grid, for ctrl of shape (N, ...))
    is unchanged; one control point is added.

    Args:
        knots: Knot vector
        ctrl: Control points, first axis runs along the knot direction
        degree: Polynomial degree
        t: Parameter strictly inside a non-empty knot span

    Returns:
        (new_knots, new_ctrl)
    """
    p = degree
    n = ctrl.shape[0]
    k = int(np.searchsorted(knots, t, side='right')) - 1

    new_ctrl = np.empty((n + 1,) + ctrl.shape[1:], dtype=np.float64)
    new_ctrl[:k - p + 1] = ctrl[:k - p + 1]
    for i in range(k - p + 1, k + 1):
        alpha = (t - knots[i]) / (knots[i + p] - knots[i])
        new_ctrl[i] = alpha * ctrl[i] + (1.0 - alpha) * ctrl[i - 1]
    new_ctrl[k + 1:] = ctrl[k:]

    new_knots = np.insert(knots, k + 1, t)
    return new_knots, new_ctrl


def refine(
    knots: np.ndarray,
    ctrl: np.ndarray,
    degree: int,
    count: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Insert knots until ctrl has `count` entries along axis 0.

    Each insertion splits the widest knot span at its midpoint, so a
    uniform vector stays as close to uniform as the counts allow.
    """
    while ctrl.shape[0] < count:
        widths = np.diff(knots)
        span = int(np.argmax(widths))
        t = 0.5 * (knots[span] + knots[span + 1])
        knots, ctrl = insert_knot(knots, ctrl, degree, t)
    return knots, ctrl


def refit(
    knots: np.ndarray,
    ctrl: np.ndarray,
    degree: int,
    count: int,
    oversample: int = 4,
    new_degree: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """Least-squares fit of a clamped uniform spline with `count` points.

    Used when the grid shrinks or changes degree; the result approximates
    the input shape.

    Args:
        knots: Current knot vector
        ctrl: Current control points along axis 0
        degree: Current polynomial degree
        count: New number of control points
        oversample: Samples per new control point
        new_degree: Degree of the fitted spline (default: keep degree)

    Returns:
        (new_knots, new_ctrl)
    """
    lo, hi = knot_domain(knots, degree)
    n_samples = max(oversample * count, oversample * ctrl.shape[0])
    params = np.linspace(lo, hi, n_samples)

    flat = ctrl.reshape(ctrl.shape[0], -1)
    samples = basis_matrix(knots, degree, params) @ flat

    if new_degree is None:
        new_degree = degree
    new_knots = clamped_uniform_knots(count, new_degree) * (hi - lo) + lo
    design = basis_matrix(new_knots, new_degree, params)
    fitted, _, _, _ = np.linalg.lstsq(design, samples, rcond=None)

    return new_knots, fitted.reshape((count,) + ctrl.shape[1:])


def evaluate_pairs(
    points: np.ndarray,
    knots_u: np.ndarray,
    knots_v: np.ndarray,
    degree_u: int,
    degree_v: int,
    u_params: np.ndarray,
    v_params: np.ndarray
) -> np.ndarray:
    """Evaluate a surface at matching (u_i, v_i) parameter pairs.

    Returns:
        Surface points (M, 3)
    """
    bu = basis_matrix(knots_u, degree_u, u_params)
    bv = basis_matrix(knots_v, degree_v, v_params)
    return np.einsum('ai,ijk,aj->ak', bu, points, bv)
