# pbrtscene/cli.py
"""
Командная строка.

    pbrtscene print scene.pbrt [--omit-long-values]
    pbrtscene convert in.pbrt out/scene.pbrt [--no-copy] [--compact]
    pbrtscene info scene.pbrt
"""

import argparse
import sys

from pbrtscene.errors import PbrtError
from pbrtscene.io.loader import load_pbrt_target
from pbrtscene.io.saver import SavePbrtOptions, save_pbrt
from pbrtscene.parse.parser import pbrt_parse_file
from pbrtscene.scene.components import ResourcesComponent
from pbrtscene.targets.printer import PrintTarget
from pbrtscene.utils.config import Config
from pbrtscene.utils.logger import logger, set_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pbrtscene",
                                     description="PBRT-v3 scene reader and writer")
    parser.add_argument("--config", default="pbrtscene.json",
                        help="JSON config file (defaults are used if it does not exist)")
    parser.add_argument("--log-level", default=None,
                        help="debug, info, warning or error")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("print", help="pretty-print the directives of a scene")
    p.add_argument("in_file")
    p.add_argument("--omit-long-values", action="store_true", default=None)

    c = sub.add_parser("convert", help="load a scene and save it again")
    c.add_argument("in_file")
    c.add_argument("out_file")
    c.add_argument("--no-copy", action="store_true",
                   help="do not copy textures, meshes and other referenced files")
    c.add_argument("--compact", action="store_true",
                   help="no comments and blank lines in the output")

    i = sub.add_parser("info", help="print node and resource counts")
    i.add_argument("in_file")
    return parser


def cmd_print(args, config: Config, out) -> int:
    omit = args.omit_long_values
    if omit is None:
        omit = bool(config.section("print")["omit_long_values"])
    pbrt_parse_file(args.in_file, PrintTarget(out, omit_long_values=omit))
    return 0


def cmd_convert(args, config: Config, out) -> int:
    options = SavePbrtOptions.from_config(config)
    if args.no_copy:
        options.copy_resources = False
    if args.compact:
        options.pretty_print = False
    root = load_pbrt_target(args.in_file).create_scene_node()
    save_pbrt(root, args.out_file, options)
    out.write(f"Saved {args.out_file}\n")
    return 0


def cmd_info(args, config: Config, out) -> int:
    target = load_pbrt_target(args.in_file)
    root = target.create_scene_node()
    nodes = sum(1 for _ in root.traverse())
    out.write(f"nodes: {nodes}\n")
    resources = root.get_component(ResourcesComponent)
    for name, count in resources.manager.counts().items():
        out.write(f"{name}: {count}\n")
    out.write(f"warnings: {len(target.warnings)}\n")
    return 0


COMMANDS = {
    "print": cmd_print,
    "convert": cmd_convert,
    "info": cmd_info,
}


def main(argv=None, out=None) -> int:
    args = build_parser().parse_args(argv)
    out = out if out is not None else sys.stdout
    config = Config(args.config, create=False)
    set_log_level(args.log_level or config.get("log_level", "info"))
    try:
        return COMMANDS[args.command](args, config, out)
    except (PbrtError, OSError) as exc:
        logger.error(f"[CLI] {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
