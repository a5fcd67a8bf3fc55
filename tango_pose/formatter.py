"""
Pose formatter driver.

This is the main module that orchestrates a run:
    1. Resolve the device intrinsics preset
    2. Read the pose log into memory
    3. Index the capture files of the capture directory
    4. For each pose record, in file order (frame index k):
        a. Convert the quaternion to a rotation matrix
        b. Write the pose description file <k>.txt
        c. Find the capture closest in time to the pose
        d. Rename that capture to <k>.jpg
    5. Summarize the run

Every failure is fatal. The device name and the capture directory are
checked before any output file is written.
"""

import csv
import json
import numpy as np
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass, field
import logging

from tqdm import tqdm

from .config import FormatterConfig, CameraIntrinsics, get_intrinsics
from .errors import NoCapturesAvailableError, RenameFailureError
from .pose_reader import PoseRecord, read_pose_file
from .capture_index import CaptureIndex
from .associator import CaptureMatch, NearestCaptureAssociator
from .rotations import quaternion_to_matrix, quaternion_norm, validate_rotation_matrix
from .writer import write_pose_record

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """Outcome of processing one pose record."""
    frame: int
    pose_time: float
    capture_time: float
    capture_index: int
    description_path: str
    source_image: str
    target_image: str
    orthonormal: bool = True
    
    @property
    def time_offset(self) -> float:
        """Capture time minus pose time (seconds)."""
        return self.capture_time - self.pose_time


@dataclass
class FormatReport:
    """Summary of a formatter run."""
    device: str = ''
    total_frames: int = 0
    total_captures: int = 0
    non_orthonormal_frames: int = 0
    mean_abs_offset: float = 0.0
    max_abs_offset: float = 0.0
    frames: List[FrameResult] = field(default_factory=list)


class PoseFormatter:
    """
    Converts a pose log into per-frame pose descriptions and renames the
    matching image captures to their frame index.
    """
    
    def __init__(self, config: FormatterConfig):
        self.config = config
        self.intrinsics: Optional[CameraIntrinsics] = None
        self.records: List[PoseRecord] = []
        self.captures: Optional[CaptureIndex] = None
    
    def load_data(self) -> None:
        """
        Resolve intrinsics, read poses and index captures.
        
        Raises:
            UnknownDeviceError: If the device name is not a preset
            FileAccessError: If the pose file cannot be read
            DirectoryAccessError: If the capture directory cannot be listed
            NoCapturesAvailableError: If no capture file was found
        """
        self.intrinsics = get_intrinsics(self.config.device)
        logger.info(
            f"Device '{self.config.device}': focal={self.intrinsics.focal}, "
            f"height={self.intrinsics.height}, width={self.intrinsics.width}"
        )
        
        self.records = read_pose_file(self.config.pose_file)
        self.captures = CaptureIndex.scan(self.config.capture_dir)
        
        if len(self.captures) == 0:
            raise NoCapturesAvailableError(
                f"No image_<timestamp>.jpg captures in {self.config.capture_dir}"
            )
        
        if len(self.captures) < len(self.records):
            logger.warning(
                f"Fewer captures ({len(self.captures)}) than pose records "
                f"({len(self.records)})"
            )
    
    def run(self) -> FormatReport:
        """
        Process every pose record.
        
        Returns:
            FormatReport with one FrameResult per pose record
        """
        if self.captures is None:
            self.load_data()
        
        output_dir = Path(self.config.resolved_output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        capture_dir = Path(self.config.capture_dir)
        
        associator = NearestCaptureAssociator(
            self.captures.timestamps,
            unique=self.config.unique_captures,
            paths=[e.path for e in self.captures],
        )
        
        frames = []
        progress = tqdm(
            self.records,
            desc="Formatting poses",
            unit="frame",
            disable=not self.config.show_progress,
        )
        for k, record in enumerate(progress):
            frames.append(self._process_record(k, record, associator, output_dir, capture_dir))
        
        report = self._summarize(frames)
        logger.info(
            f"Formatted {report.total_frames} frames, "
            f"mean |capture - pose| = {report.mean_abs_offset:.4f} s, "
            f"max = {report.max_abs_offset:.4f} s"
        )
        return report
    
    def _process_record(
        self,
        k: int,
        record: PoseRecord,
        associator: NearestCaptureAssociator,
        output_dir: Path,
        capture_dir: Path,
    ) -> FrameResult:
        """Write frame k and rename its capture."""
        rotation = quaternion_to_matrix(record.qx, record.qy, record.qz, record.qw)
        orthonormal = validate_rotation_matrix(rotation)
        if not orthonormal:
            logger.warning(
                f"Frame {k}: quaternion norm {quaternion_norm(record.qx, record.qy, record.qz, record.qw):.6f}, "
                f"rotation matrix is not orthonormal"
            )
        
        description_path = output_dir / self.config.frame_name(k, '.txt')
        logger.debug(f"{description_path.name}")
        write_pose_record(str(description_path), record, rotation, self.intrinsics)
        
        match: CaptureMatch = associator.match_frame(k, record.time)
        target = capture_dir / self.config.frame_name(k, '.jpg')
        
        logger.debug(f"{match.path.name} -> {target.name}")
        self._rename(match.path, target)
        
        return FrameResult(
            frame=match.frame,
            pose_time=match.pose_time,
            capture_time=match.capture_time,
            capture_index=match.capture_index,
            description_path=str(description_path),
            source_image=str(match.path),
            target_image=str(target),
            orthonormal=orthonormal,
        )
    
    @staticmethod
    def _rename(source: Path, target: Path) -> None:
        if not source.exists():
            raise RenameFailureError(
                f"Renaming of {source} failed: file does not exist "
                f"(already assigned to an earlier frame?)"
            )
        if target.exists():
            raise RenameFailureError(
                f"Renaming of {source} failed: {target} already exists"
            )
        try:
            source.rename(target)
        except OSError as e:
            raise RenameFailureError(f"Renaming of {source} to {target} failed: {e}") from e
    
    def _summarize(self, frames: List[FrameResult]) -> FormatReport:
        report = FormatReport(
            device=self.config.device,
            total_frames=len(frames),
            total_captures=len(self.captures),
            frames=frames,
        )
        if frames:
            offsets = np.abs([f.time_offset for f in frames])
            report.mean_abs_offset = float(np.mean(offsets))
            report.max_abs_offset = float(np.max(offsets))
            report.non_orthonormal_frames = sum(1 for f in frames if not f.orthonormal)
        return report
    
    def save_report(self, report: FormatReport, output_path: str) -> None:
        """
        Save the run report to a JSON file.
        
        Args:
            report: Report returned by run()
            output_path: Path for output JSON file
        """
        data = {
            'summary': {
                'device': report.device,
                'total_frames': report.total_frames,
                'total_captures': report.total_captures,
                'non_orthonormal_frames': report.non_orthonormal_frames,
                'mean_abs_offset': report.mean_abs_offset,
                'max_abs_offset': report.max_abs_offset,
            },
            'frames': [
                {
                    'frame': r.frame,
                    'pose_time': r.pose_time,
                    'capture_time': r.capture_time,
                    'time_offset': r.time_offset,
                    'description': r.description_path,
                    'source_image': r.source_image,
                    'target_image': r.target_image,
                    'orthonormal': r.orthonormal,
                }
                for r in report.frames
            ],
        }
        
        with open(output_path, 'w') as f:
            json.dump(data, f, indent=2)
        
        logger.info(f"Report saved to {output_path}")
    
    def save_associations_csv(self, report: FormatReport, output_path: str) -> None:
        """Save the frame to capture pairing as CSV."""
        with open(output_path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow([
                'frame', 'pose_time', 'capture_time', 'time_offset',
                'source_image', 'target_image',
            ])
            for r in report.frames:
                writer.writerow([
                    r.frame,
                    f"{r.pose_time:.6f}",
                    f"{r.capture_time:.6f}",
                    f"{r.time_offset:.6f}",
                    Path(r.source_image).name,
                    Path(r.target_image).name,
                ])
        
        logger.info(f"Associations saved to {output_path}")


def run_formatter(config: FormatterConfig) -> FormatReport:
    """
    Convenience function to run the formatter.
    
    Args:
        config: Run configuration
        
    Returns:
        FormatReport of the run
    """
    formatter = PoseFormatter(config)
    formatter.load_data()
    return formatter.run()
