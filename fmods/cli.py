"""Command line interface of the mod manager."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from termcolor import colored

from fmods.config import Config, default_config_path
from fmods.dependencies import Changes, DependencyError, process_dependencies
from fmods.downloader import DownloadError, Downloader
from fmods.factorio_api import ApiError, FactorioApi
from fmods.instance import Instance, InstanceError
from fmods.mod_info import Version

_YES_NO = ["y", "n"]


def _yellow(value: object) -> str:
    return colored(str(value), "light_yellow")


def _count(value: int, color: str) -> str:
    return colored(str(value), color)


def _read_line() -> str:
    """Read one line from standard input; an exhausted input reads as empty."""
    try:
        return input()
    except EOFError:
        return ""


def choose(message: str, variants: Sequence[str]) -> str:
    """Ask until the answer, lower-cased, is one of ``variants``, and return it."""
    while True:
        print(message)
        answer = input().lower().rstrip()
        if answer in variants:
            return answer


def _yes_no_prompt(question: str) -> str:
    yes = colored("y", attrs=["bold"])
    no = colored("n", attrs=["bold"])
    return f"{question} ({yes}es/{no}o)"


def instance_info(instance: Instance, name: str) -> None:
    """Print a summary of an instance."""
    print(
        f"Instance:       {_yellow(name)}\n"
        f"Path:           {_yellow(instance.path)}\n"
        f"Version:        {_yellow(instance.version)}\n"
        f"Mods installed: {_yellow(len(instance.mods))}\n"
        "Game content versions:"
    )
    for content, version in instance.game_content_versions.items():
        print(f"  {content} {_yellow(version)}")


def _version_arg(text: str) -> Version:
    try:
        return Version.parse(text)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from None


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fmods", description="Manage Factorio mods.")
    parser.add_argument("--ask", action="store_true")
    parser.add_argument("--no-ask", action="store_true")
    parser.add_argument("--instance")
    commands = parser.add_subparsers(dest="command", required=True)

    instances = commands.add_parser("instances", help="Work with instances")
    instance_commands = instances.add_subparsers(dest="instances_command", required=True)
    add = instance_commands.add_parser("add", help="Add new instance")
    add.add_argument("name")
    add.add_argument("path", type=Path)
    add.add_argument("--replace", action="store_true")
    add.add_argument("--default", action="store_true")
    remove_instance = instance_commands.add_parser("remove", help="Remove an instance")
    remove_instance.add_argument("name")
    instance_commands.add_parser("list", help="List all instances")
    default = instance_commands.add_parser("default", help="Set default instance")
    default.add_argument("name")
    instance_commands.add_parser("unset-default", help="Unset default")

    commands.add_parser("info", help="Info about instance")
    commands.add_parser("list", help="List installed mods")
    download = commands.add_parser("download", help="Download mod")
    download.add_argument("name")
    download.add_argument("mod_version", nargs="?", type=_version_arg)
    remove = commands.add_parser("remove", help="Remove mod")
    remove.add_argument("name")
    return parser


def _not_found(name: str) -> None:
    print(f'A instance with the name "{name}" was not found.')


def _instances_command(config: Config, args: argparse.Namespace, ask: bool) -> None:
    command = args.instances_command
    if command == "add":
        if args.name in config.instances and not args.replace:
            print(f'The instance "{args.name}" already exists.')
            if not ask:
                return
            if choose(_yes_no_prompt("Do you want replace instance?"), _YES_NO) == "n":
                return
        try:
            instance = Instance.open(args.path)
        except InstanceError as err:
            print(f"Failed to open instance: {err}")
            return
        instance_info(instance, args.name)
        config.instances[args.name] = args.path
        if args.default:
            config.default_instance = args.name
        config.save()
    elif command == "remove":
        if args.name not in config.instances:
            _not_found(args.name)
            return
        del config.instances[args.name]
        if config.default_instance == args.name:
            config.default_instance = None
        print(f'The instance "{args.name}" is removed')
        config.save()
    elif command == "list":
        if config.default_instance is None:
            default = colored("not specified", "dark_grey")
        else:
            default = _yellow(config.default_instance)
        print(f"Default instance: {default}")
        print(f"Saved {_count(len(config.instances), 'light_blue')} instances:")
        for name, path in config.instances.items():
            print(f"  {_yellow(name)} -> {_yellow(path)}")
    elif command == "default":
        if args.name not in config.instances:
            _not_found(args.name)
            return
        config.default_instance = args.name
        print(f'The instance "{args.name}" is default now.')
        config.save()
    elif command == "unset-default":
        config.default_instance = None
        print("The default instance no specified now.")
        config.save()


def _select_instance_name(config: Config, args: argparse.Namespace, ask: bool) -> str | None:
    name = args.instance if args.instance is not None else config.default_instance
    if name is None and ask:
        print("Select instance")
        for known in config.instances:
            print(f"  {_yellow(known)}")
        name = _read_line().rstrip()
    return name


def _download(instance: Instance, name: str, version: Version | None) -> None:
    api = FactorioApi(instance)
    try:
        mod = api.get_mod(name)
    except ApiError as err:
        print(f"Failed to fetch mod: {err}")
        return

    if not mod.releases:
        print("No suitable releases found")
        return

    if version is None:
        print("Select version:")
        for release in mod.releases:
            print(f"  {_yellow(release.version)}")
        try:
            version = Version.parse(_read_line().rstrip())
        except ValueError as err:
            print(f"Failed to parse version: {err}")
            return

    print("Processing dependencies...")
    try:
        dependencies = process_dependencies(api, instance, name, version)
    except DependencyError as err:
        print(f"Failed to process dependencies: {err}")
        return

    changes = Changes.compute(instance, dependencies)

    print(f"Install ({_count(len(changes.install), 'light_green')}):")
    for install in changes.install:
        print(f"  {_yellow(install.mod_id)} {_yellow(install.version)}")

    print(f"Update ({_count(len(changes.update), 'light_yellow')}):")
    for update in changes.update:
        print(
            f"  {_yellow(update.mod_id)} {_yellow(update.old_version)}"
            f" -> {_yellow(update.new_version)}"
        )

    print(f"Conflicts ({_count(len(changes.conflicts), 'light_red')}):")
    for conflict in changes.conflicts:
        print(f"  {_yellow(conflict)}")

    downloader = Downloader(instance)

    if choose(_yes_no_prompt("Proceed?"), _YES_NO) == "n":
        return

    try:
        print("Downloading...")
        for install in changes.install:
            downloader.download(install.mod_id, install.version)

        print("Updating...")
        for update in changes.update:
            instance.remove_mod(update.mod_id)
            downloader.download(update.mod_id, update.new_version)
    except DownloadError as err:
        print(f"Failed to download: {err}")
        return

    print("Removing conflicts...")
    for conflict in changes.conflicts:
        instance.remove_mod(conflict)

    print(colored("\nDone!", "light_green", attrs=["bold"]))


def _instance_command(config: Config, args: argparse.Namespace, ask: bool) -> None:
    name = _select_instance_name(config, args, ask)
    if name is None:
        print("No instance selected.")
        return

    path = config.instances.get(name)
    if path is None:
        _not_found(name)
        return
    try:
        instance = Instance.open(path)
    except InstanceError as err:
        print(f'Failed to open instance "{name}": {err}')
        return

    if args.command == "info":
        instance_info(instance, name)
    elif args.command == "list":
        print(f"Installed {_count(len(instance.mods), 'light_blue')} mods:")
        for mod in instance.mods:
            print(f"  {_yellow(mod.name)} {_yellow(mod.version)}")
    elif args.command == "download":
        _download(instance, args.name, args.mod_version)
    elif args.command == "remove":
        if instance.find_mod(args.name) is None:
            print(f'The mod "{args.name}" was not found.')
        else:
            instance.remove_mod(args.name)
            print(f'The mod "{args.name}" was removed')


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line interface."""
    try:
        default_config_path().parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass

    config = Config.load()
    args = _parser().parse_args(argv)
    ask = (config.ask or args.ask) and not args.no_ask

    try:
        if args.command == "instances":
            _instances_command(config, args, ask)
        else:
            _instance_command(config, args, ask)
    except EOFError:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())