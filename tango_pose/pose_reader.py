"""
Pose log reader.

Pose File Format:
    Plain text, whitespace-separated floating-point numbers. Every 8
    consecutive numbers form one record, regardless of line breaks:

        t  qx  qy  qz  qw  tx  ty  tz

    - t: pose timestamp (seconds)
    - qx, qy, qz, qw: orientation quaternion, scalar part last
    - tx, ty, tz: translation
    
    Records are expected in non-decreasing time order.
"""

import numpy as np
from pathlib import Path
from typing import List, Sequence
from dataclasses import dataclass
import logging

from .errors import FileAccessError, PoseFileFormatError

logger = logging.getLogger(__name__)

RECORD_WIDTH = 8


@dataclass(frozen=True)
class PoseRecord:
    """One pose sample: timestamp, orientation quaternion and translation."""
    time: float
    qx: float
    qy: float
    qz: float
    qw: float
    tx: float
    ty: float
    tz: float
    
    @classmethod
    def from_values(cls, values: Sequence[float]) -> "PoseRecord":
        """Build a record from 8 numbers in file order."""
        if len(values) != RECORD_WIDTH:
            raise PoseFileFormatError(
                f"A pose record needs {RECORD_WIDTH} values, got {len(values)}"
            )
        return cls(*(float(v) for v in values))
    
    @property
    def quaternion(self) -> np.ndarray:
        """Orientation as (x, y, z, w)."""
        return np.array([self.qx, self.qy, self.qz, self.qw])
    
    @property
    def translation(self) -> np.ndarray:
        """Translation as (x, y, z)."""
        return np.array([self.tx, self.ty, self.tz])


def read_pose_file(filepath: str) -> List[PoseRecord]:
    """
    Read every pose record of a pose log into memory.
    
    Args:
        filepath: Path to the pose log
        
    Returns:
        List of PoseRecord in file order
        
    Raises:
        FileAccessError: If the file is missing or unreadable
        PoseFileFormatError: If the file contains a non-numeric token
    """
    path = Path(filepath)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            tokens = f.read().split()
    except UnicodeDecodeError as e:
        raise PoseFileFormatError(f"Pose file {filepath} is not a text file: {e}") from e
    except OSError as e:
        raise FileAccessError(f"Cannot read pose file {filepath}: {e}") from e
    
    values = []
    for position, token in enumerate(tokens):
        try:
            values.append(float(token))
        except ValueError:
            record, field_index = divmod(position, RECORD_WIDTH)
            raise PoseFileFormatError(
                f"Non-numeric value {token!r} in {filepath} "
                f"(record {record}, field {field_index})"
            ) from None
    
    leftover = len(values) % RECORD_WIDTH
    if leftover:
        logger.warning(
            f"Ignoring {leftover} trailing value(s) in {filepath}: "
            f"not a complete record of {RECORD_WIDTH}"
        )
        values = values[:len(values) - leftover]
    
    data = np.array(values, dtype=np.float64).reshape(-1, RECORD_WIDTH)
    records = [PoseRecord.from_values(row) for row in data]
    
    times = data[:, 0]
    backwards = np.flatnonzero(np.diff(times) < 0)
    for index in backwards:
        logger.warning(
            f"Pose time goes backwards at record {index + 1}: "
            f"{times[index + 1]:.6f} < {times[index]:.6f}"
        )
    
    logger.info(f"Read {len(records)} pose records from {filepath}")
    return records
