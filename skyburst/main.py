#!/usr/bin/env python
"""
Skyburst CLI - Particle fireworks display

Usage:
    skyburst [options]

Examples:
    skyburst                                   # Live window, default show
    skyburst --preset grand_finale             # Built-in preset
    skyburst --config show.yaml --seed 7       # Settings from a YAML file
    skyburst --record show.gif --frames 300    # Headless render to GIF
    skyburst --list-presets
"""

import argparse
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='skyburst',
        description="Particle fireworks display",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Firework Types:
  peony          - Round burst, the classic
  chrysanthemum  - Peony with more push and longer tails
  palm           - A few thick branches
  horsetail      - Narrow upward plume that droops
  willow         - Slow, long-lived, drooping
  strobe         - Blinking white stars
  crackling      - Stars that pop tiny sparks
  multi_break    - Mini-shells that burst again
  random         - Any of the above

Window Controls:
  SPACE launch, A auto-launch, P panel, H help, ESC/Q quit
        """
    )

    parser.add_argument('--width', type=int, default=1280, help='Viewport width in pixels (default: 1280)')
    parser.add_argument('--height', type=int, default=720, help='Viewport height in pixels (default: 720)')
    parser.add_argument('--fps', type=int, default=60, help='Target frame rate (default: 60)')
    parser.add_argument(
        '--preset',
        type=str,
        default=None,
        help='Apply a named preset (see --list-presets)'
    )
    parser.add_argument(
        '--preset-info',
        type=str,
        default=None,
        metavar='NAME',
        help='Show the settings of a preset'
    )
    parser.add_argument(
        '--list-presets',
        action='store_true',
        help='List available presets'
    )
    parser.add_argument(
        '--save-preset',
        type=str,
        default=None,
        metavar='NAME',
        help='Save the resulting settings as a user preset and exit'
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='YAML config file (applied before --preset)'
    )
    parser.add_argument(
        '--type',
        type=str,
        default=None,
        help='Force one firework type'
    )
    parser.add_argument(
        '--style',
        type=str,
        default=None,
        choices=['classic', 'fluid', 'quantum'],
        help='Particle style'
    )
    parser.add_argument(
        '--manual',
        action='store_true',
        help='Start with auto-launch off (click to launch)'
    )
    parser.add_argument(
        '--record',
        type=Path,
        default=None,
        metavar='OUT.gif',
        help='Render headless and write an animated GIF'
    )
    parser.add_argument(
        '--frames',
        type=int,
        default=240,
        help='Frames to render with --record (default: 240)'
    )
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument(
        '--log-level',
        type=str,
        default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Log level (default: WARNING)'
    )
    parser.add_argument('--log-file', type=Path, default=None, help='Also write logs to a rotating file')
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose logging and tracebacks on error'
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    from skyburst.logging_config import setup_logging
    setup_logging('skyburst', 'DEBUG' if args.verbose else args.log_level, args.log_file)

    from skyburst.core.presets import PresetManager

    # Preset listing/info need no simulation
    if args.list_presets:
        manager = PresetManager()
        print("Available Show Presets:\n")
        for name in manager.list_all():
            preset = manager.get(name)
            print(f"  {name:<18} - {preset.description}")
        print(f"\nTotal: {len(manager.list_all())} presets")
        print("\nUsage: --preset <name>")
        sys.exit(0)

    if args.preset_info:
        manager = PresetManager()
        preset = manager.get(args.preset_info)
        if not preset:
            print(f"Error: Preset '{args.preset_info}' not found")
            print("Use --list-presets to see available presets")
            sys.exit(1)
        print(f"Preset: {preset.name}")
        print(f"Description: {preset.description}")
        print("\nSettings:")
        if not preset.settings:
            print("  (defaults)")
        for key, value in preset.settings.items():
            print(f"  {key}: {value}")
        if preset.tags:
            print(f"\nTags: {', '.join(preset.tags)}")
        sys.exit(0)

    if args.width <= 0 or args.height <= 0 or args.fps <= 0:
        print("Error: --width, --height and --fps must be positive")
        sys.exit(1)
    if args.record and args.frames <= 0:
        print("Error: --frames must be positive")
        sys.exit(1)

    from skyburst.core.config import ConfigError, FireworkConfig
    from skyburst.core.presets import load_config_file

    try:
        config = load_config_file(args.config) if args.config else FireworkConfig()

        if args.preset:
            preset = PresetManager().get(args.preset)
            if not preset:
                print(f"Error: Preset '{args.preset}' not found")
                print("Use --list-presets to see available presets")
                sys.exit(1)
            print(f"Using preset: {args.preset} ({preset.description})")
            preset.apply(config)

        if args.type:
            config.set('firework_type', args.type)
        if args.style:
            config.set('particle_style', args.style)
        if args.manual:
            config.set('auto_launch', False)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.save_preset:
        path = PresetManager().save_config(args.save_preset, config, description='Saved from the command line')
        print(f"Saved preset '{args.save_preset}' to {path}")
        sys.exit(0)

    try:
        if args.record:
            from skyburst import render_frames
            from skyburst.render.exporter import export_gif

            print(f"Rendering {args.frames} frames at {args.width}x{args.height}...")
            images = render_frames(config, args.width, args.height, args.frames, args.fps, args.seed)
            output = export_gif(images, args.record, fps=args.fps)
            print(f"Output: {output}")
            return

        from skyburst.core.state import SimulationState
        from skyburst.core.system import FireworkSystem
        from skyburst.render.window import FireworksWindow, PYGAME_AVAILABLE

        if not PYGAME_AVAILABLE:
            print("Error: The live window requires pygame. Install with: pip install pygame")
            print("       Or render headless with --record out.gif")
            sys.exit(1)
        state = SimulationState.create(args.width, args.height, seed=args.seed)
        FireworksWindow(FireworkSystem(config), state, fps=args.fps).run()

    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
