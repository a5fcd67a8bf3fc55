"""
Tests for the pose description writer.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from tango_pose.writer import format_pose_record, write_pose_record, read_pose_description
from tango_pose.config import DEVICE_PRESETS
from tango_pose.pose_reader import PoseRecord
from tango_pose.rotations import quaternion_to_matrix


IDENTITY_BLUE = (
    "TVector\n"
    "1.5000000000000\n"
    "2.5000000000000\n"
    "3.5000000000000\n"
    "\n"
    "RMatrix\n"
    "  1.0000000000000  0.0000000000000  0.0000000000000\n"
    "  0.0000000000000  1.0000000000000  0.0000000000000\n"
    "  0.0000000000000  0.0000000000000  1.0000000000000\n"
    "\n"
    "Camera Intrinsics: focal height width\n"
    "1042.800000 720.000000 1280.000000"
)


@pytest.fixture
def identity_record():
    return PoseRecord.from_values([0.0, 0, 0, 0, 1, 1.5, 2.5, 3.5])


class TestFormatPoseRecord:
    """Tests for the text layout."""
    
    def test_identity_layout(self, identity_record):
        text = format_pose_record(
            identity_record,
            quaternion_to_matrix(0.0, 0.0, 0.0, 1.0),
            DEVICE_PRESETS['blue'],
        )
        assert text == IDENTITY_BLUE
    
    def test_black_intrinsics(self, identity_record):
        text = format_pose_record(identity_record, np.eye(3), DEVICE_PRESETS['black'])
        assert text.splitlines()[-1] == "1042.400000 720.000000 1280.000000"
    
    def test_negative_values(self):
        record = PoseRecord.from_values([0.0, 0, 0, 0, 1, -0.125, 0, 42])
        R = np.array([[0, -1, 0], [1, 0, 0], [0, 0, 1]], dtype=float)
        lines = format_pose_record(record, R, DEVICE_PRESETS['blue']).splitlines()
        
        assert lines[1] == "-0.1250000000000"
        assert lines[3] == "42.0000000000000"
        assert lines[6] == "  0.0000000000000  -1.0000000000000  0.0000000000000"
    
    def test_flat_rotation_accepted(self, identity_record):
        text = format_pose_record(identity_record, np.eye(3).ravel(), DEVICE_PRESETS['blue'])
        assert text == IDENTITY_BLUE
    
    def test_no_trailing_newline(self, identity_record):
        text = format_pose_record(identity_record, np.eye(3), DEVICE_PRESETS['blue'])
        assert not text.endswith("\n")


class TestWriteAndRead:
    """Round trip through a written file."""
    
    def test_write_exact_contents(self, tmp_path, identity_record):
        path = tmp_path / "000.txt"
        write_pose_record(str(path), identity_record, np.eye(3), DEVICE_PRESETS['blue'])
        assert path.read_text() == IDENTITY_BLUE
    
    def test_round_trip_precision(self, tmp_path):
        q = np.array([0.1, -0.2, 0.3, 0.5])
        q /= np.linalg.norm(q)
        record = PoseRecord.from_values([12.5, *q, 0.123456789012345, -9.87654321, 1e-3])
        R = quaternion_to_matrix(*q)
        path = tmp_path / "001.txt"
        
        write_pose_record(str(path), record, R, DEVICE_PRESETS['black'])
        translation, rotation, intrinsics = read_pose_description(str(path))
        
        assert_allclose(translation, record.translation, rtol=0, atol=1e-13)
        assert_allclose(rotation, R, rtol=0, atol=1e-13)
        assert intrinsics == DEVICE_PRESETS['black']
    
    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_pose_description(str(tmp_path / "missing.txt"))
    
    def test_read_malformed_file(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("TVector\n1.0\n2.0\n")
        with pytest.raises(ValueError):
            read_pose_description(str(path))
