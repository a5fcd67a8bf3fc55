"""
Nearest-neighbour association of pose times with capture times.

Pose records and image captures come from two independently clocked
streams that both move forward in time. For each pose time, in order, the
associator selects the capture time closest to it among the captures at or
after the previous match. It owns a cursor into the sorted capture times
that only ever moves forward, so a full run is O(n + m).

Constraint:
    Pose times must be non-decreasing. The cursor is never moved back, so a
    pose time earlier than a previous one is matched against the captures
    at or after the previous match only.
"""

from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Tuple
import logging

from .errors import NoCapturesAvailableError

logger = logging.getLogger(__name__)


class CaptureMatch(NamedTuple):
    """The capture selected for one pose record."""
    frame: int
    pose_time: float
    capture_index: int
    capture_time: float
    path: Optional[Path] = None
    
    @property
    def time_offset(self) -> float:
        """Capture time minus pose time (seconds)."""
        return self.capture_time - self.pose_time


class NearestCaptureAssociator:
    """
    Stateful nearest-capture matcher with a monotonic cursor.
    
    Args:
        capture_times: Capture timestamps, sorted ascending
        unique: If True, every match starts one past the previous match so
                no capture is assigned to two poses
        paths: Optional capture file paths, parallel to capture_times
    """
    
    def __init__(
        self,
        capture_times: Sequence[float],
        unique: bool = False,
        paths: Optional[Sequence[Path]] = None,
    ):
        self.capture_times = list(capture_times)
        self.unique = unique
        self.paths = list(paths) if paths is not None else None
        
        if self.paths is not None and len(self.paths) != len(self.capture_times):
            raise ValueError(
                f"Got {len(self.paths)} capture paths for {len(self.capture_times)} capture times"
            )
        
        if not self.capture_times:
            raise NoCapturesAvailableError("No capture timestamps available")
        
        self._cursor = 0
        self._matched = False
    
    @property
    def cursor(self) -> int:
        """Index of the most recent match (0 before the first match)."""
        return self._cursor
    
    def match(self, pose_time: float) -> int:
        """
        Find the capture closest in time to a pose.
        
        Args:
            pose_time: Pose timestamp, not earlier than the previous one
            
        Returns:
            Index into capture_times of the selected capture
            
        Raises:
            NoCapturesAvailableError: In unique mode, when every capture has
                                      already been assigned
        """
        times = self.capture_times
        c = self._cursor
        
        if self.unique and self._matched:
            c += 1
            if c >= len(times):
                raise NoCapturesAvailableError(
                    f"All {len(times)} captures are already assigned "
                    f"(pose time {pose_time})"
                )
        
        while c + 1 < len(times) and abs(times[c + 1] - pose_time) < abs(times[c] - pose_time):
            c += 1
        
        self._cursor = c
        self._matched = True
        return c
    
    def match_time(self, pose_time: float) -> float:
        """Capture timestamp closest to pose_time (see match())."""
        return self.capture_times[self.match(pose_time)]
    
    def match_frame(self, frame: int, pose_time: float) -> CaptureMatch:
        """Match the pose of frame k and describe the selected capture."""
        index = self.match(pose_time)
        return CaptureMatch(
            frame=frame,
            pose_time=pose_time,
            capture_index=index,
            capture_time=self.capture_times[index],
            path=self.paths[index] if self.paths is not None else None,
        )


def associate(
    pose_times: Sequence[float],
    capture_times: Sequence[float],
    unique: bool = False,
) -> List[Tuple[int, float]]:
    """
    Associate every pose time with its nearest capture time.
    
    Args:
        pose_times: Pose timestamps in non-decreasing order
        capture_times: Capture timestamps, sorted ascending
        unique: Never assign the same capture twice
        
    Returns:
        One (capture index, capture time) pair per pose time
    """
    associator = NearestCaptureAssociator(capture_times, unique=unique)
    pairs = []
    for t in pose_times:
        index = associator.match(t)
        pairs.append((index, associator.capture_times[index]))
    return pairs
