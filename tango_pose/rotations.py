"""
Rotation utilities.

Converts orientation quaternions to 3x3 rotation matrices.

Quaternion Convention:
    (x, y, z, w) with the scalar part last, as logged by the Tango pose API.

The conversion does not normalize its input. A non-unit quaternion gives a
scaled, non-orthonormal matrix; use validate_rotation_matrix() to detect it.
"""

import numpy as np
import logging

logger = logging.getLogger(__name__)


def quaternion_to_matrix(x: float, y: float, z: float, w: float) -> np.ndarray:
    """
    Compute the rotation matrix of a quaternion.
    
    Args:
        x, y, z: Vector part
        w: Scalar part
        
    Returns:
        3x3 rotation matrix (row-major), a new array on every call
    """
    return np.array([
        [1 - 2*y*y - 2*z*z, 2*x*y - 2*z*w, 2*x*z + 2*y*w],
        [2*x*y + 2*z*w, 1 - 2*x*x - 2*z*z, 2*y*z - 2*x*w],
        [2*x*z - 2*y*w, 2*y*z + 2*x*w, 1 - 2*x*x - 2*y*y],
    ], dtype=np.float64)


def quaternion_norm(x: float, y: float, z: float, w: float) -> float:
    """Euclidean norm of a quaternion."""
    return float(np.sqrt(x*x + y*y + z*z + w*w))


def validate_rotation_matrix(R: np.ndarray, tol: float = 1e-6) -> bool:
    """Check R^T R = I and det R = +1, as holds for any unit quaternion."""
    R = np.asarray(R)
    return (
        R.shape == (3, 3)
        and np.allclose(R.T @ R, np.eye(3), atol=tol)
        and bool(np.isclose(np.linalg.det(R), 1.0, atol=tol))
    )
