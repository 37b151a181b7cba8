"""CLI entry point: starsystem-tools generate|show|remove|plot subcommands."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import uuid
from typing import NoReturn, TextIO

from starsystem_tools.config import get_definitions_path, get_settings_path, get_world_dir
from starsystem_tools.definitions import DefinitionPool, default_definitions, load_definitions
from starsystem_tools.model import AsteroidFormationBody, PlanetBody, SystemData, SystemObject
from starsystem_tools.rendering.system_map import draw_system_map
from starsystem_tools.session import StarSystemSession
from starsystem_tools.settings import load_settings

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or STARSYSTEM_TOOLS_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('STARSYSTEM_TOOLS_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )
    logging.getLogger('matplotlib').setLevel(logging.WARNING)


def _build_session(args: argparse.Namespace) -> StarSystemSession:
    """Session for the world directory and optional settings/definition files."""
    settings = load_settings(getattr(args, 'settings', None) or get_settings_path())
    definitions_path = getattr(args, 'definitions', None) or get_definitions_path()
    definitions = load_definitions(definitions_path) if definitions_path else default_definitions()
    pool = DefinitionPool.from_definitions(
        definitions, settings.definition_lists, settings.allow_vanilla_planets
    )
    return StarSystemSession(args.world_dir, settings, pool)


def _describe(obj: SystemObject) -> str:
    x, y, z = obj.center_position
    text = f'{obj.kind.value:<9} {obj.display_name} [{obj.id}] at ({x:.0f}, {y:.0f}, {z:.0f})'
    if isinstance(obj, PlanetBody):
        text += f' subtype={obj.subtype_id} diameter={obj.diameter:.0f}'
        if obj.generated:
            text += f' entity={obj.entity_id}'
    elif isinstance(obj, AsteroidFormationBody):
        lo, hi = obj.size_range
        text += f' type={obj.asteroid_type_name} sizes={lo:.0f}-{hi:.0f}'
    return text


def write_tree(stream: TextIO, data: SystemData) -> None:
    """Write the system tree, one indented line per body."""
    if data.center_object is None:
        stream.write('No star system.\n')
        return

    def _walk(obj: SystemObject, depth: int) -> None:
        stream.write('  ' * depth + _describe(obj) + '\n')
        for child in obj.children:
            _walk(child, depth + 1)

    _walk(data.center_object, 0)
    stream.write(f'{data.count()} objects\n')


def _generate_cmd(args: argparse.Namespace) -> int:
    session = _build_session(args)
    session.load()
    if session.system.count() > 0 and not args.force:
        print(f'World {args.world_dir} already has a star system (use --force).', file=sys.stderr)
        return 1
    session.system = SystemData()
    session.registry.clear_instances()
    session.init(args.seed, args.salt)
    if not session.save():
        print(f'Error: could not save system to {args.world_dir}', file=sys.stderr)
        return 1
    print(f'Generated {session.system.count()} objects in {args.world_dir}')
    return 0


def _show_cmd(args: argparse.Namespace) -> int:
    session = _build_session(args)
    write_tree(sys.stdout, session.load())
    return 0


def _remove_cmd(args: argparse.Namespace) -> int:
    try:
        obj_id = uuid.UUID(args.id)
    except ValueError:
        print(f'Error: invalid object id {args.id!r}', file=sys.stderr)
        return 1
    session = _build_session(args)
    session.load()
    if not session.remove_object(obj_id):
        print(f'Error: cannot remove {obj_id} (unknown, root, or orphaned)', file=sys.stderr)
        return 1
    return 0 if session.save() else 1


def _plot_cmd(args: argparse.Namespace) -> int:
    session = _build_session(args)
    data = session.load()
    if data.count() == 0:
        print(f'Error: no star system in {args.world_dir}', file=sys.stderr)
        return 1
    draw_system_map(data, args.output, session.registry, title=args.title)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for starsystem-tools CLI (generate | show | remove | plot).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='starsystem-tools',
        description='Generate and inspect procedural star systems.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    def _add_world(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            '--world-dir',
            type=str,
            default=get_world_dir(),
            help='World directory holding the system file; env: STARSYSTEM_WORLD_DIR',
        )
        p.add_argument('--settings', type=str, default=None, help='Generator settings JSON; env: STARSYSTEM_SETTINGS')
        p.add_argument('--definitions', type=str, default=None, help='Definition catalog JSON; env: STARSYSTEM_DEFINITIONS')

    gen_parser = subparsers.add_parser('generate', help='Generate a new star system')
    _add_world(gen_parser)
    gen_parser.add_argument('--seed', type=int, default=0, help='World procedural seed')
    gen_parser.add_argument(
        '--salt', type=int, default=None, help='Fixed seed salt (default: random, new system each run)'
    )
    gen_parser.add_argument('--force', action='store_true', help='Replace an existing system')
    gen_parser.set_defaults(func=_generate_cmd)

    show_parser = subparsers.add_parser('show', help='Print the system tree')
    _add_world(show_parser)
    show_parser.set_defaults(func=_show_cmd)

    remove_parser = subparsers.add_parser('remove', help='Remove a body, keeping its children')
    _add_world(remove_parser)
    remove_parser.add_argument('id', type=str, help='Object id (UUID)')
    remove_parser.set_defaults(func=_remove_cmd)

    plot_parser = subparsers.add_parser('plot', help='Draw a top-down system map')
    _add_world(plot_parser)
    plot_parser.add_argument('--output', type=str, required=True, help='Output image file')
    plot_parser.add_argument('--title', type=str, default='', help='Plot title')
    plot_parser.set_defaults(func=_plot_cmd)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return args.func(args)
    except (ValueError, RuntimeError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())
