"""
Configuration module for the pose formatter.

Holds the fixed camera intrinsics presets of the two Tango devices and the
run configuration, which can be loaded from and saved to YAML files.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, Optional
import logging

from .errors import UnknownDeviceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraIntrinsics:
    """Camera intrinsics written into every pose description file."""
    focal: float  # Focal length (pixels)
    height: float  # Image height (pixels)
    width: float  # Image width (pixels)


DEVICE_PRESETS: Dict[str, CameraIntrinsics] = {
    'blue': CameraIntrinsics(focal=1042.8, height=720, width=1280),
    'black': CameraIntrinsics(focal=1042.4, height=720, width=1280),
}


def get_intrinsics(device: str) -> CameraIntrinsics:
    """
    Look up the intrinsics preset for a device.
    
    Args:
        device: Device name, matched exactly (case-sensitive)
        
    Returns:
        The preset intrinsics
        
    Raises:
        UnknownDeviceError: If the name is not a known preset
    """
    try:
        return DEVICE_PRESETS[device]
    except KeyError:
        raise UnknownDeviceError(device, DEVICE_PRESETS) from None


@dataclass
class FormatterConfig:
    """
    Configuration of a single formatter run.
    
    Attributes:
        pose_file: Path to the pose log (t qx qy qz qw tx ty tz per record)
        device: Device name selecting the intrinsics preset ('blue' or 'black')
        capture_dir: Directory holding the image_<timestamp>.jpg captures
        output_dir: Directory for the <k>.txt files (defaults to capture_dir)
        frame_digits: Zero-padding width of the frame index
        unique_captures: Never assign the same capture to two frames
        show_progress: Show a progress bar while processing frames
    """
    pose_file: str
    device: str
    capture_dir: str = '.'
    output_dir: Optional[str] = None
    frame_digits: int = 3
    unique_captures: bool = False
    show_progress: bool = False
    
    @property
    def resolved_output_dir(self) -> str:
        """Directory the pose description files are written to."""
        return self.output_dir if self.output_dir is not None else self.capture_dir
    
    def frame_name(self, frame: int, suffix: str) -> str:
        """File name of a frame, e.g. frame_name(7, '.txt') -> '007.txt'."""
        return f"{frame:0{self.frame_digits}d}{suffix}"
    
    @classmethod
    def from_yaml(
        cls,
        config_path: str,
        pose_file: Optional[str] = None,
        device: Optional[str] = None,
    ) -> "FormatterConfig":
        """
        Load configuration from a YAML file.
        
        Relative paths in the file are resolved against the directory of the
        YAML file. pose_file and device given as arguments take precedence
        over the values in the file.
        
        Args:
            config_path: Path to the YAML configuration file
            pose_file: Optional pose file overriding the YAML value
            device: Optional device name overriding the YAML value
            
        Returns:
            FormatterConfig with loaded parameters
            
        Example YAML structure:
            pose_file: poses.txt
            device: blue
            capture_dir: captures
            output_dir: frames
            frame_digits: 3
            unique_captures: false
            show_progress: false
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        
        logger.info(f"Loading configuration from {config_path}")
        
        config_dir = path.parent
        
        def resolve(value):
            if value is None:
                return None
            return str(config_dir / value)
        
        if pose_file is None:
            if 'pose_file' not in data:
                raise ValueError("Configuration is missing 'pose_file'")
            pose_file = resolve(data['pose_file'])
        if device is None:
            if 'device' not in data:
                raise ValueError("Configuration is missing 'device'")
            device = str(data['device'])
        
        return cls(
            pose_file=pose_file,
            device=device,
            capture_dir=resolve(data.get('capture_dir', '.')),
            output_dir=resolve(data.get('output_dir')),
            frame_digits=int(data.get('frame_digits', 3)),
            unique_captures=bool(data.get('unique_captures', False)),
            show_progress=bool(data.get('show_progress', False)),
        )
    
    def to_yaml(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        data = {
            'pose_file': self.pose_file,
            'device': self.device,
            'capture_dir': self.capture_dir,
            'output_dir': self.output_dir,
            'frame_digits': self.frame_digits,
            'unique_captures': self.unique_captures,
            'show_progress': self.show_progress,
        }
        
        with open(config_path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        
        logger.info(f"Configuration saved to {config_path}")
