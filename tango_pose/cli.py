"""
Command-line interface for the pose formatter.

Usage:
    tango-pose-format POSE_FILE DEVICE [--capture-dir DIR] [--output-dir DIR]
"""

import argparse
import logging
import sys

from .config import FormatterConfig, DEVICE_PRESETS
from .errors import PoseFormatterError
from .formatter import PoseFormatter


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='tango-pose-format',
        description='Write one pose description per pose record and rename '
                    'the closest image capture to the frame index',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    # Poses and captures in the current directory
    tango-pose-format poses.txt blue
    
    # Captures elsewhere, descriptions into a separate directory
    tango-pose-format poses.txt black --capture-dir ./captures --output-dir ./frames
    
    # Settings from YAML, pairing table for inspection
    tango-pose-format poses.txt blue --config run.yaml --associations-csv pairs.csv
'''
    )
    
    parser.add_argument(
        'pose_file',
        type=str,
        help='Pose log: t qx qy qz qw tx ty tz per record'
    )
    
    parser.add_argument(
        'device',
        type=str,
        help=f"Device name selecting the intrinsics ({', '.join(DEVICE_PRESETS)})"
    )
    
    parser.add_argument(
        '--config', '-c',
        type=str,
        default=None,
        help='YAML file with run settings (capture_dir, output_dir, ...)'
    )
    
    parser.add_argument(
        '--capture-dir',
        type=str,
        default=None,
        help='Directory with image_<timestamp>.jpg captures (default: .)'
    )
    
    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        default=None,
        help='Directory for the <k>.txt files (default: capture directory)'
    )
    
    parser.add_argument(
        '--unique-captures',
        action='store_true',
        help='Never assign the same capture to two frames'
    )
    
    parser.add_argument(
        '--report',
        type=str,
        default=None,
        help='Write a JSON run report to this path'
    )
    
    parser.add_argument(
        '--associations-csv',
        type=str,
        default=None,
        help='Write the frame/capture pairing table to this CSV path'
    )
    
    parser.add_argument(
        '--progress',
        action='store_true',
        help='Show a progress bar'
    )
    
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )
    
    return parser


def build_config(args: argparse.Namespace) -> FormatterConfig:
    """Merge YAML settings and command-line options into a FormatterConfig."""
    if args.config:
        config = FormatterConfig.from_yaml(
            args.config,
            pose_file=args.pose_file,
            device=args.device,
        )
    else:
        config = FormatterConfig(pose_file=args.pose_file, device=args.device)
    
    if args.capture_dir is not None:
        config.capture_dir = args.capture_dir
    if args.output_dir is not None:
        config.output_dir = args.output_dir
    if args.unique_captures:
        config.unique_captures = True
    if args.progress:
        config.show_progress = True
    
    return config


def main(argv=None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)
    
    # Setup logging
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)
    
    try:
        config = build_config(args)
        
        formatter = PoseFormatter(config)
        formatter.load_data()
        report = formatter.run()
        
        if args.report:
            formatter.save_report(report, args.report)
        if args.associations_csv:
            formatter.save_associations_csv(report, args.associations_csv)
        
        print(f"Frames written:       {report.total_frames}")
        print(f"Captures indexed:     {report.total_captures}")
        print(f"Mean |time offset|:   {report.mean_abs_offset:.4f} s")
        print(f"Max |time offset|:    {report.max_abs_offset:.4f} s")
        return 0
        
    except PoseFormatterError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
