"""shlinkrun CLI: drive the Shlink plugin from the terminal.

Usage::

    shlinkrun info [--json]                                # plugin summary
    shlinkrun options                                      # settings the plugin accepts

    shlinkrun query --config shlink.toml sl                # usage hint
    shlinkrun query --config shlink.toml https://example.com
    shlinkrun query --config shlink.toml sl https://example.com mycode "my-title" --select 1

    shlinkrun shorten https://example.com mycode --host https://s.io --key KEY
    shlinkrun show skill shorten_url

Settings come from a TOML file (``--config``) with a ``[shlink]`` table and/or
from repeatable ``--host``/``--key``/``--tag`` flags, which take precedence.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .exceptions import Cancelled, ShlinkError
from .host import ConsoleApi, PluginInitContext
from .plugins.base import PluginRegistry
from .settings import ShlinkSettings
from .skill import SkillResult


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(name)s %(levelname)s: %(message)s",
    )


def _load_settings(args) -> ShlinkSettings:
    config = getattr(args, "config", None)
    settings = ShlinkSettings.load(config) if config else ShlinkSettings()
    if getattr(args, "hosts", None):
        settings.hosts = "\r".join(args.hosts)
    if getattr(args, "keys", None):
        settings.keys = "\r".join(args.keys)
    if getattr(args, "tags", None):
        settings.tags = "\r".join(args.tags)
    if getattr(args, "timeout", None) is not None:
        settings.timeout = args.timeout if args.timeout > 0 else None
    return settings


def _build_plugin(settings: Optional[ShlinkSettings] = None, api: Optional[ConsoleApi] = None):
    from .plugins.shlink import ShlinkPlugin

    plugin = ShlinkPlugin(settings=settings)
    registry = PluginRegistry(PluginInitContext(api=api or ConsoleApi()))
    registry.register(plugin)
    return registry, plugin


# ---------------------------------------------------------------------------
# info / options
# ---------------------------------------------------------------------------


def cmd_info(args):
    """Print a summary of the Shlink plugin."""
    registry, plugin = _build_plugin()
    m = plugin.manifest

    if getattr(args, "json", False):
        info = m.to_dict()
        info["skills"] = sorted(registry.skills)
        registry.close()
        print(json.dumps(info, indent=2))
        return

    print(f"  Plugin:         {m.display_name} ({m.name})")
    print(f"  ID:             {m.plugin_id}")
    print(f"  Version:        {m.version}")
    print(f"  Action keyword: {m.action_keyword or '-'}")
    print(f"  Global match:   {'yes' if m.global_match else 'no'}")
    print(f"  Skills:         {', '.join(sorted(registry.skills))}")
    registry.close()


def cmd_options(args):
    """List the settings the plugin accepts."""
    registry, plugin = _build_plugin()
    options = plugin.additional_options
    registry.close()

    if getattr(args, "json", False):
        print(json.dumps([o.to_dict() for o in options], indent=2))
        return

    for option in options:
        default = f" (default: {option.default})" if option.default is not None else ""
        print(f"  {option.name:<12} {option.type:<8} {option.display_name}{default}")
        if option.description:
            print(f"  {'':<12} {'':<8} {option.description}")


# ---------------------------------------------------------------------------
# query
# ---------------------------------------------------------------------------


def cmd_query(args):
    """Run a launcher query and optionally invoke one of the results."""
    try:
        settings = _load_settings(args)
    except ShlinkError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    api = ConsoleApi(use_clipboard=not args.no_clipboard)
    registry, _ = _build_plugin(settings, api)
    try:
        results = registry.query(" ".join(args.text))

        if not results:
            print("  No results.")
            return

        for i, result in enumerate(results, 1):
            marker = "" if result.actionable else "  (info)"
            print(f"  {i}. {result.title}{marker}")
            if result.sub_title:
                print(f"     {result.sub_title}")

        if args.select is None:
            return

        if not 1 <= args.select <= len(results):
            print(f"No result #{args.select}", file=sys.stderr)
            sys.exit(1)
        selected = results[args.select - 1]
        if not selected.actionable:
            print(f"Result #{args.select} has no action", file=sys.stderr)
            sys.exit(1)
        if not selected.invoke():
            sys.exit(1)
    finally:
        registry.close()


# ---------------------------------------------------------------------------
# shorten
# ---------------------------------------------------------------------------


def cmd_shorten(args):
    """Shorten one URL on one instance through the ``shorten_url`` skill."""
    try:
        settings = _load_settings(args)
        instances = settings.instances()
    except ShlinkError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not 0 <= args.instance < len(instances):
        print(f"No instance #{args.instance} (have {len(instances)})", file=sys.stderr)
        sys.exit(1)
    instance = instances[args.instance]

    registry, _ = _build_plugin(settings)
    skill_obj = registry.get_skill("shorten_url")
    registry.close()

    kwargs: Dict[str, Any] = {
        "url": args.url,
        "host": instance.host,
        "api_key": instance.api_key,
        "shortcode": args.shortcode,
        "title": args.title,
        "tags": settings.tag_list,
        "timeout": settings.timeout,
    }
    try:
        result = asyncio.run(skill_obj.ainvoke(**kwargs))
    except (asyncio.CancelledError, KeyboardInterrupt):
        result = SkillResult.from_error(Cancelled(instance.host))

    if getattr(args, "raw", False):
        if result.success:
            print(json.dumps(result.value, indent=2))
        else:
            print(json.dumps({"error": result.error, "kind": result.error_kind}, indent=2), file=sys.stderr)
            sys.exit(1)
        return

    if result.success:
        print(result.value["short_url"])
    else:
        print(f"  Error ({result.error_kind}): {result.error}", file=sys.stderr)
        sys.exit(1)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


def cmd_show(args):
    """Show details about a skill."""
    registry, _ = _build_plugin()
    skill_obj = registry.get_skill(args.name)
    registry.close()

    if skill_obj is None:
        print(f"Skill not found: {args.name}", file=sys.stderr)
        sys.exit(1)

    d = skill_obj.descriptor
    print(f"  {d.title} ({d.name})")
    print(f"  {d.description}")
    print()
    print(f"  Risk:     {d.risk_level.value}")
    print(f"  Network:  {'yes' if d.requires_network else 'no'}")
    print(f"  Async:    {'yes' if d.is_async else 'no'}")
    print()

    schema = d.input_schema
    if schema and schema.get("properties"):
        required = set(d.required_params)
        print("  Parameters:")
        for pname, pschema in schema["properties"].items():
            req_str = " (required)" if pname in required else ""
            ptype = pschema.get("type", "any")
            print(f"    {pname:<12} {ptype:<8}{req_str}")
        print()

    if d.config_params:
        print("  Config:")
        for cp in d.config_params:
            default = f" (default: {cp.default})" if cp.default is not None else ""
            print(f"    {cp.name}: {cp.type}{default}")
        print()


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _add_settings_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="TOML file with a [shlink] table")
    parser.add_argument("--host", dest="hosts", action="append", help="Shlink host (repeatable)")
    parser.add_argument("--key", dest="keys", action="append", help="API key, same order as --host (repeatable)")
    parser.add_argument("--tag", dest="tags", action="append", help="Tag added to every short URL (repeatable)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds (0 disables)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shlinkrun",
        description="shlinkrun: create short URLs on Shlink instances",
    )
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v, -vv)")
    sub = parser.add_subparsers(dest="command")

    # --- info ---
    p_info = sub.add_parser("info", help="Show plugin summary")
    p_info.add_argument("--json", action="store_true", help="Output the manifest as JSON")

    # --- options ---
    p_options = sub.add_parser("options", help="List plugin settings")
    p_options.add_argument("--json", action="store_true", help="Output as JSON")

    # --- query ---
    p_query = sub.add_parser("query", help="Run a launcher query")
    p_query.add_argument("text", nargs="+", help="Query text, e.g. 'sl https://example.com mycode'")
    p_query.add_argument("--select", type=int, help="Invoke result N (1-based)")
    p_query.add_argument("--no-clipboard", action="store_true", help="Print the short URL instead of copying it")
    _add_settings_args(p_query)

    # --- shorten ---
    p_shorten = sub.add_parser("shorten", help="Shorten a URL on one instance")
    p_shorten.add_argument("url", help="URL to shorten")
    p_shorten.add_argument("shortcode", nargs="?", default=None, help="Custom slug")
    p_shorten.add_argument("title", nargs="?", default=None, help="Title (needs a shortcode)")
    p_shorten.add_argument("--instance", type=int, default=0, help="Index of the configured instance to use")
    p_shorten.add_argument("--raw", action="store_true", help="Output raw JSON")
    _add_settings_args(p_shorten)

    # --- show ---
    p_show = sub.add_parser("show", help="Show detailed info about a skill")
    p_show.add_argument("what", choices=["skill"])
    p_show.add_argument("name", help="Name of the skill")

    return parser


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(f"shlinkrun {__version__}")
        return

    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return

    commands = {
        "info": cmd_info,
        "options": cmd_options,
        "query": cmd_query,
        "shorten": cmd_shorten,
        "show": cmd_show,
    }

    handler = commands.get(args.command)
    if handler:
        handler(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
