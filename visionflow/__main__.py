"""
VisionFlow Command Line Interface

Usage:
    visionflow <command> [options]

Commands:
    track       Track moving blobs in a video
    config      Write an example configuration file

Examples:
    visionflow track input.mp4 --trajectories-csv tracks.csv
    visionflow track input.mp4 -c visionflow.json -s 25 -p 4 --features-csv f.csv
    visionflow config --create visionflow.json
"""

import sys
import argparse
import logging

from visionflow import __version__


def parse_size(value: str) -> tuple[int, int]:
    """Parse a WIDTHxHEIGHT string."""
    try:
        width, height = (int(v) for v in value.lower().split('x'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {value!r}")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='visionflow',
        description='Sparse feature and blob tracking for video',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        '-V', '--version',
        action='version',
        version=f'visionflow {__version__}',
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Track command
    track_parser = subparsers.add_parser(
        'track',
        help='Track moving blobs in a video',
    )
    track_parser.add_argument('input', help='Input video file')
    track_parser.add_argument(
        '-c', '--config',
        help='JSON configuration file',
    )
    track_parser.add_argument(
        '-s', '--sensitivity',
        type=float,
        default=None,
        help='Detector sensitivity (default: from config, 30)',
    )
    track_parser.add_argument(
        '-p', '--persistence',
        type=float,
        default=None,
        help='Trajectory distance gate multiplier (default: from config, 10)',
    )
    track_parser.add_argument(
        '--display-size',
        type=parse_size,
        default=(1920, 1080),
        metavar='WxH',
        help='Coordinate space for trajectories (default: 1920x1080)',
    )
    track_parser.add_argument(
        '--features-csv',
        metavar='PATH',
        help='Write per-frame features to PATH',
    )
    track_parser.add_argument(
        '--trajectories-csv',
        metavar='PATH',
        help='Write trajectory histories to PATH',
    )
    track_parser.add_argument(
        '--smooth',
        type=float,
        default=0.0,
        help='Gaussian sigma for trajectory export (default: 0)',
    )
    track_parser.add_argument(
        '--activity-csv',
        metavar='PATH',
        help='Write the active trajectory count over time to PATH',
    )
    track_parser.add_argument(
        '-fs', '--first-frame',
        type=int,
        default=1,
        help='First frame to process (default: 1)',
    )
    track_parser.add_argument(
        '-fe', '--frame-end',
        type=int,
        default=None,
        help='Last frame to process (default: end of video)',
    )
    track_parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress progress output',
    )
    track_parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging',
    )

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Write an example configuration file',
    )
    config_parser.add_argument(
        '--create',
        metavar='PATH',
        default='visionflow.json',
        help='Output path (default: visionflow.json)',
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == 'track':
        return run_track(args)
    elif args.command == 'config':
        return run_config(args)
    else:
        parser.print_help()
        return 1


def load_run_config(args):
    """Resolve the configuration for a track run: file, then env, then flags."""
    from visionflow.core.config import Config, apply_env_overrides, load_config

    config = load_config(args.config) if args.config else Config()
    apply_env_overrides(config)
    if args.sensitivity is not None:
        config.params.sensitivity = args.sensitivity
    if args.persistence is not None:
        config.params.persistence = args.persistence
    return config


def run_track(args):
    """Run the feature engine and trajectory tracker over a video."""
    from visionflow.core.video import VideoReader
    from visionflow.outputs import OutputManager
    from visionflow.tracking import FeatureEngine, TrajectoryTracker

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        )

    config = load_run_config(args)
    engine = FeatureEngine(config.engine)
    tracker = TrajectoryTracker(config.tracker)

    display_w, display_h = args.display_size
    scale_x = display_w / config.engine.width
    scale_y = display_h / config.engine.height

    outputs = OutputManager()
    if args.features_csv:
        outputs.add_output('features', args.features_csv)
    if args.trajectories_csv:
        outputs.add_output('trajectories', args.trajectories_csv, smooth=args.smooth)
    if args.activity_csv:
        outputs.add_output('activity', args.activity_csv)

    if not args.quiet:
        print(f"Tracking blobs in {args.input}")

    trajectories = []
    analysis_size = (config.engine.width, config.engine.height)
    with VideoReader(args.input, args.first_frame, args.frame_end, analysis_size) as reader:
        outputs.initialize_all(reader.properties.to_dict())

        for frame_num, timestamp, rgba in reader:
            result = engine.process(rgba, config.params.sensitivity)
            blobs = [b.to_point(scale_x, scale_y) for b in result.blobs]
            trajectories = tracker.update(blobs, timestamp, config.params)
            outputs.process_frame(frame_num, timestamp, result, trajectories)

            if not args.quiet:
                print(
                    f"\rFrame {frame_num}: {len(result.features)} features, "
                    f"{len(result.blobs)} blobs, {tracker.active_count} active",
                    end='',
                )

        outputs.finalize_all()

    if not args.quiet:
        active = sum(1 for t in trajectories if t.active)
        print(f"\nDone! {len(trajectories)} trajectories ({active} active at end)")
        for path in outputs.get_output_paths():
            print(f"  Wrote {path}")
    return 0


def run_config(args):
    """Write an example configuration file."""
    from visionflow.core.config import create_example_config

    create_example_config(args.create)
    print(f"Created example configuration: {args.create}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
