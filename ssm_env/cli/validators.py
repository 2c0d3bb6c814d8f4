"""Input validation for CLI arguments."""
import sys


def validate_parameter_path(path: str) -> None:
    """
    Validate a parameter hierarchy path.

    SSM hierarchies start with a forward slash. An empty path is allowed
    and means "load nothing".

    Raises:
        SystemExit with code 2 if validation fails
    """
    if path == "":
        return

    if not path.startswith("/"):
        print(f"Error: Invalid parameter path '{path}'", file=sys.stderr)
        print("\nParameter paths must start with a forward slash (/)", file=sys.stderr)
        print("\nExamples of valid paths:", file=sys.stderr)
        print("  ✓ /my-app/prod", file=sys.stderr)
        print("  ✓ /my-app/prod/", file=sys.stderr)
        print("\nExamples of invalid paths:", file=sys.stderr)
        print("  ✗ my-app/prod (missing leading slash)", file=sys.stderr)
        sys.exit(2)


def validate_command(command: list) -> None:
    """
    Validate that a command to execute was given.

    Raises:
        SystemExit with code 2 if no command was given
    """
    if not command:
        print("Error: No command given to execute", file=sys.stderr)
        print("\nUsage: ssm-env exec [PATH] -- COMMAND [ARGS...]", file=sys.stderr)
        sys.exit(2)
