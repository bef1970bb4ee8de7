from __future__ import annotations

import argparse
import sys
from pathlib import Path

from security_hook.cli.interface import CLInterface
from security_hook.config.ollama_config import set_ollama_model, set_ollama_url, set_probe_timeout
from security_hook.config.scan_config import (
    UNAVAILABLE_POLICIES,
    get_exclude_file_name,
    set_max_content_chars,
    set_regex_safety_net,
    set_unavailable_policy,
)
from security_hook.config.settings_store import get_settings_file, load_settings, set_setting
from security_hook.core.exclusions import create_exclude_file
from security_hook.core.git_index import GitIndex
from security_hook.core.hook_installer import install_global_hook, install_hook
from security_hook.core.ollama_client import OllamaClient
from security_hook.core.pipeline import SecurityCheck
from security_hook.exception.exception import (
    HookInstallError,
    ServiceError,
    ServiceUnavailableError,
    ToolMissingError,
)

SETTERS = {
    "ollama.url": set_ollama_url,
    "ollama.model": set_ollama_model,
    "ollama.probe_timeout": set_probe_timeout,
    "scan.max_content_chars": set_max_content_chars,
    "scan.unavailable_policy": set_unavailable_policy,
    "scan.regex_safety_net": set_regex_safety_net,
    "scan.exclude_file": lambda value: set_setting("scan.exclude_file", str(value).strip()),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="security-hook",
        description="Block commits that stage secrets, using a local Ollama model or regex detectors.",
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Scan staged files (default).")
    run_parser.add_argument("--policy", choices=UNAVAILABLE_POLICIES, help="Behaviour when Ollama is unreachable.")
    run_parser.add_argument("--model", help="Ollama model to use for this run.")
    run_parser.add_argument("--repo", help="Repository to scan instead of the current one.")

    install_parser = subparsers.add_parser("install", help="Install the pre-commit hook.")
    install_parser.add_argument("target", nargs="?", help="Repository root (default: current directory).")
    install_parser.add_argument("-g", "--global", dest="global_install", action="store_true",
                                help="Install into the global git template directory.")

    exclude_parser = subparsers.add_parser("init-exclude", help="Create a sample exclusion file.")
    exclude_parser.add_argument("target", nargs="?", help="Directory to write into (default: current directory).")

    subparsers.add_parser("models", help="List models offered by the local Ollama server.")

    config_parser = subparsers.add_parser("config", help="Show or change persisted settings.")
    config_sub = config_parser.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Print current settings.")
    set_parser = config_sub.add_parser("set", help="Persist one setting.")
    set_parser.add_argument("key", choices=sorted(SETTERS))
    set_parser.add_argument("value")
    return parser


def _run(args, interface: CLInterface) -> int:
    interface.print_banner()
    check = SecurityCheck(
        git_index=GitIndex(args.repo) if args.repo else None,
        client=OllamaClient(model=args.model) if args.model else None,
        policy=args.policy,
    )
    try:
        report = check.run()
    except ToolMissingError as error:
        interface.print_error(str(error.error_message))
        return 1
    except ServiceUnavailableError as error:
        interface.print_error(str(error.error_message))
        interface.print_warning("Please ensure Ollama is running and accessible.")
        return 1
    interface.show_scan_report(report)
    return report.exit_code


def _install(args, interface: CLInterface) -> int:
    try:
        if args.global_install:
            hook_path = install_global_hook()
            interface.print_success(f"Security pre-commit hook installed globally at {hook_path}")
            interface.print_info("New repositories get the hook on `git init`; run `git init` in existing ones.")
        else:
            hook_path = install_hook(args.target)
            interface.print_success(f"Installed pre-commit hook: {hook_path}")
            interface.print_info("The hook scans staged files for secrets on every commit.")
    except (HookInstallError, ToolMissingError) as error:
        interface.print_error(str(error.error_message))
        return 1
    return 0


def _init_exclude(args, interface: CLInterface) -> int:
    target_dir = Path(args.target or Path.cwd())
    created = create_exclude_file(target_dir, get_exclude_file_name())
    if created is None:
        interface.print_info(f"{get_exclude_file_name()} already exists in {target_dir}.")
        return 0
    interface.print_success(f"Created sample exclusion file: {created}")
    return 0


def _models(interface: CLInterface) -> int:
    client = OllamaClient()
    try:
        models = client.list_models()
    except ServiceError as error:
        interface.print_error(str(error.error_message))
        return 1
    if not models:
        interface.print_info(f"No models installed on {client.base_url}.")
        return 0
    for name in models:
        marker = " (configured)" if name == client.model else ""
        interface.console.print(f"- {name}{marker}")
    return 0


def _config(args, interface: CLInterface) -> int:
    if args.config_command == "set":
        try:
            saved = SETTERS[args.key](args.value)
        except ValueError as error:
            interface.print_error(str(error))
            return 1
        if not saved:
            interface.print_error(f"Could not write settings file {get_settings_file()}")
            return 1
        interface.print_success(f"Saved {args.key}.")
        return 0
    interface.show_settings(load_settings(), get_settings_file())
    return 0


def main(argv: list[str] | None = None, interface: CLInterface | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    interface = interface or CLInterface()

    command = args.command or "run"
    if command == "run":
        if args.command is None:
            args = parser.parse_args(["run"])
        return _run(args, interface)
    if command == "install":
        return _install(args, interface)
    if command == "init-exclude":
        return _init_exclude(args, interface)
    if command == "models":
        return _models(interface)
    if command == "config":
        return _config(args, interface)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
