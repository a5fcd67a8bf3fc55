"""
Pose description writer.

Each pose record is written to its own text file:

    TVector
    <tx>
    <ty>
    <tz>

    RMatrix
      <r0>  <r1>  <r2>
      <r3>  <r4>  <r5>
      <r6>  <r7>  <r8>

    Camera Intrinsics: focal height width
    <focal> <height> <width>

Translation and rotation values carry 13 decimal digits, intrinsics use
six. The file has no trailing newline.
"""

import numpy as np
from pathlib import Path
from typing import Tuple
import logging

from .config import CameraIntrinsics
from .pose_reader import PoseRecord

logger = logging.getLogger(__name__)

TVECTOR_HEADER = 'TVector'
RMATRIX_HEADER = 'RMatrix'
INTRINSICS_HEADER = 'Camera Intrinsics: focal height width'


def format_pose_record(
    record: PoseRecord,
    rotation: np.ndarray,
    intrinsics: CameraIntrinsics,
) -> str:
    """
    Render the pose description of one record.
    
    Args:
        record: Pose record supplying the translation
        rotation: 3x3 rotation matrix of the record's quaternion
        intrinsics: Camera intrinsics of the device
        
    Returns:
        File contents
    """
    rotation = np.asarray(rotation).reshape(3, 3)
    lines = [TVECTOR_HEADER]
    lines.extend(f"{value:.13f}" for value in (record.tx, record.ty, record.tz))
    lines.append('')
    lines.append(RMATRIX_HEADER)
    for row in rotation:
        lines.append(''.join(f"  {value:.13f}" for value in row))
    lines.append('')
    lines.append(INTRINSICS_HEADER)
    lines.append(f"{intrinsics.focal:f} {intrinsics.height:f} {intrinsics.width:f}")
    return '\n'.join(lines)


def write_pose_record(
    output_path: str,
    record: PoseRecord,
    rotation: np.ndarray,
    intrinsics: CameraIntrinsics,
) -> None:
    """Write the pose description of one record to output_path."""
    with open(output_path, 'w') as f:
        f.write(format_pose_record(record, rotation, intrinsics))
    
    logger.debug(f"Wrote {output_path}")


def read_pose_description(filepath: str) -> Tuple[np.ndarray, np.ndarray, CameraIntrinsics]:
    """
    Read a pose description file back.
    
    Args:
        filepath: Path of a file written by write_pose_record()
        
    Returns:
        Tuple of (translation (3,), rotation (3, 3), intrinsics)
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Pose description not found: {filepath}")
    
    lines = [line.strip() for line in path.read_text().splitlines()]
    
    try:
        t_start = lines.index(TVECTOR_HEADER) + 1
        r_start = lines.index(RMATRIX_HEADER) + 1
        i_start = lines.index(INTRINSICS_HEADER) + 1
        
        translation = np.array([float(v) for v in lines[t_start:t_start + 3]])
        rotation = np.array([
            [float(v) for v in line.split()]
            for line in lines[r_start:r_start + 3]
        ])
        focal, height, width = (float(v) for v in lines[i_start].split())
    except (ValueError, IndexError) as e:
        raise ValueError(f"Malformed pose description {filepath}: {e}") from e
    
    if translation.shape != (3,) or rotation.shape != (3, 3):
        raise ValueError(f"Malformed pose description {filepath}")
    
    return translation, rotation, CameraIntrinsics(focal=focal, height=height, width=width)
