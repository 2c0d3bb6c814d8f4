"""CLI entrypoint for ssm-env."""
import os
import sys
import argparse
import logging
from pathlib import Path

from .validators import validate_parameter_path, validate_command

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr
    )


def _resolve_path(cli_path):
    from ssm_env.parameters.domains.config_loader import load_config, resolve_path

    path = resolve_path(cli_path, load_config())
    validate_parameter_path(path)
    return path


def cmd_version(args):
    """Show version information."""
    print(f"ssm-env {VERSION}")


def _split_exec_args(option_path, exec_args):
    """
    Split 'exec' arguments into the parameter path and the command.

    Both forms are accepted:
        ssm-env exec /my-app/prod -- python app.py
        ssm-env exec -p /my-app/prod -- python app.py

    Without '--' every argument belongs to the command.

    Raises:
        SystemExit with code 2 if more than one path is given
    """
    exec_args = list(exec_args)
    if "--" not in exec_args:
        return option_path, exec_args

    separator = exec_args.index("--")
    leading, command = exec_args[:separator], exec_args[separator + 1:]
    if len(leading) > 1 or (leading and option_path is not None):
        print("Error: Give at most one parameter path before '--'", file=sys.stderr)
        print("\nUsage: ssm-env exec [PATH] -- COMMAND [ARGS...]", file=sys.stderr)
        sys.exit(2)

    if leading:
        return leading[0], command
    return option_path, command


def cmd_exec(args):
    """Load parameters into the environment, then run a command."""
    from ssm_env.parameters.workflows.env_loader import load_env_from_path

    cli_path, command = _split_exec_args(args.path, args.exec_args)
    validate_command(command)

    path = _resolve_path(cli_path)
    if path == "":
        logger.warning("No parameter path configured, running command without loading parameters")
    load_env_from_path(path)

    sys.stdout.flush()
    sys.stderr.flush()
    os.execvp(command[0], command)


def cmd_list(args):
    """Print the variable names that would be set, never the values."""
    from ssm_env.parameters.domains.environment import MappingEnvironment
    from ssm_env.parameters.workflows.env_loader import load_env_from_path

    path = _resolve_path(args.path)
    environment = MappingEnvironment()
    load_env_from_path(path, environment=environment)

    for name in sorted(environment.variables):
        print(name)


def cmd_config_set_path(args):
    """Set config file path preference."""
    from ssm_env.parameters.domains.preferences import set_preference

    config_path = Path(args.path).resolve()

    if not config_path.exists():
        print(f"Error: Config file does not exist: {config_path}", file=sys.stderr)
        sys.exit(1)

    if not config_path.is_file():
        print(f"Error: Path is not a file: {config_path}", file=sys.stderr)
        sys.exit(1)

    set_preference("config_path", str(config_path))
    print(f"Config path set to: {config_path}")


def cmd_config_show(args):
    """Show current config file path."""
    from ssm_env.parameters.domains.config_loader import default_config_path
    from ssm_env.parameters.domains.preferences import get_preference

    config_path_pref = get_preference("config_path")

    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            print(f"Config path: {config_path}")
        else:
            print(f"Config path (from preference, but file not found): {config_path}")
        print("Source: preference")
    else:
        default_config = default_config_path()
        print(f"Config path: {default_config}")
        if default_config.exists():
            print("Source: default")
        else:
            print("Source: default (file not found, using ambient AWS configuration)")


def cmd_config_clear(args):
    """Clear config path preference."""
    from ssm_env.parameters.domains.config_loader import default_config_path
    from ssm_env.parameters.domains.preferences import clear_preference

    clear_preference("config_path")
    print(f"Config path preference cleared. Will use default: {default_config_path()}")


def main():
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (configuration, credentials, network, environment)
        2 - Usage errors (invalid arguments, invalid parameter path, etc.)
    """
    parser = argparse.ArgumentParser(
        prog="ssm-env",
        description="ssm-env - load AWS SSM Parameter Store parameters into environment variables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (configuration, credentials, network, environment)
  2 - Usage error (invalid arguments, invalid parameter path, etc.)

Environment variables:
  SSM_ENV_PATH - Parameter path to load (overrides config file)
  AWS_PROFILE  - AWS profile (when not set in config file)
  AWS_REGION   - AWS region (when not set in config file)

Configuration:
  Default location: ~/.config/ssm-env/config.yml (optional)
  Custom path: Set with 'ssm-env config set-path <path>'
  View current: Run 'ssm-env config show'
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v for info, -vv for debug)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of ssm-env"
    )

    exec_parser = subparsers.add_parser(
        "exec",
        help="Load parameters and run a command",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Load every parameter under PATH into the environment, then replace this
process with COMMAND.

Each parameter name has PATH removed to form the variable name:
  /my-app/prod/DB_HOST -> DB_HOST

Parameters with an empty value are skipped. Existing variables are
overwritten. If loading fails, COMMAND is not run.
        """
    )
    exec_parser.add_argument(
        "-p", "--path",
        help="Parameter path (defaults to SSM_ENV_PATH, then 'ssm.path' in config)"
    )
    exec_parser.add_argument(
        "exec_args",
        metavar="ARGS",
        nargs=argparse.REMAINDER,
        help="[PATH] -- COMMAND [ARGS...]: optional parameter path, then the command to run"
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List variable names that would be set",
        description="Print the environment variable names found under PATH. Values are never printed."
    )
    list_parser.add_argument(
        "path",
        nargs="?",
        help="Parameter path (defaults to SSM_ENV_PATH, then 'ssm.path' in config)"
    )

    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage ssm-env configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set config file path",
        description="""
Set the configuration file path preference.

This stores the absolute path to your config file in:
~/.config/ssm-env/preferences.json
        """
    )
    config_set_path_parser.add_argument(
        "path",
        help="Path to config file"
    )

    config_subparsers.add_parser(
        "show",
        help="Show current config path",
        description="Display the current configuration file path and its source."
    )

    config_subparsers.add_parser(
        "clear",
        help="Clear config path preference",
        description="Remove the config path preference and use ~/.config/ssm-env/config.yml"
    )

    args = parser.parse_args()
    _configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "exec":
            cmd_exec(args)
        elif args.command == "list":
            cmd_list(args)
        elif args.command == "config":
            if args.config_command == "set-path":
                cmd_config_set_path(args)
            elif args.config_command == "show":
                cmd_config_show(args)
            elif args.config_command == "clear":
                cmd_config_clear(args)
            else:
                config_parser.print_help()
                sys.exit(2)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
