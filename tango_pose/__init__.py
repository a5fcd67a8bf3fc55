"""
Tango Pose Formatter

Converts a Tango pose log into one pose description file per record and
pairs each record with the image capture closest to it in time, renaming
that capture to the record's frame index.

Pipeline:
    pose log → PoseRecord → rotation matrix → <k>.txt
                         ↘ nearest capture → image_<t>.jpg renamed to <k>.jpg

Conventions:
    - Quaternions are (x, y, z, w), scalar last
    - Frame indices are 0-based and zero-padded to 3 digits
    - Camera intrinsics come from the 'blue' and 'black' device presets
"""

from .config import FormatterConfig, CameraIntrinsics, DEVICE_PRESETS, get_intrinsics
from .errors import (
    PoseFormatterError,
    ArgumentError,
    UnknownDeviceError,
    FileAccessError,
    DirectoryAccessError,
    PoseFileFormatError,
    NoCapturesAvailableError,
    RenameFailureError,
)
from .rotations import quaternion_to_matrix, validate_rotation_matrix
from .pose_reader import PoseRecord, read_pose_file
from .capture_index import CaptureIndex, CaptureEntry
from .associator import CaptureMatch, NearestCaptureAssociator, associate
from .writer import format_pose_record, write_pose_record, read_pose_description
from .formatter import PoseFormatter, FormatReport, FrameResult, run_formatter

__version__ = "1.0.0"
__all__ = [
    "FormatterConfig",
    "CameraIntrinsics",
    "DEVICE_PRESETS",
    "get_intrinsics",
    "PoseFormatterError",
    "ArgumentError",
    "UnknownDeviceError",
    "FileAccessError",
    "DirectoryAccessError",
    "PoseFileFormatError",
    "NoCapturesAvailableError",
    "RenameFailureError",
    "quaternion_to_matrix",
    "validate_rotation_matrix",
    "PoseRecord",
    "read_pose_file",
    "CaptureIndex",
    "CaptureEntry",
    "CaptureMatch",
    "NearestCaptureAssociator",
    "associate",
    "format_pose_record",
    "write_pose_record",
    "read_pose_description",
    "PoseFormatter",
    "FormatReport",
    "FrameResult",
    "run_formatter",
]
