"""Workflow for loading SSM parameters into environment variables."""
import logging
import threading
from typing import Optional

from ..domains.config_loader import ConfigError, load_config, get_aws_settings
from ..domains.environment import ProcessEnvironment
from ..domains.errors import ConnectionConfigError, LoadCancelled
from ..domains.ssm_client import SSMParameterClient

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"


def normalize_path(path: str) -> str:
    """Append a trailing separator so '/app' never matches '/app2/x'."""
    if path.endswith(PATH_SEPARATOR):
        return path
    return path + PATH_SEPARATOR


def _default_client() -> SSMParameterClient:
    try:
        config = load_config()
    except ConfigError as e:
        raise ConnectionConfigError(f"Invalid ssm-env configuration: {e}") from e

    client = SSMParameterClient(get_aws_settings(config))
    client.connect()
    return client


def load_env_from_path(
    path: str,
    client=None,
    environment=None,
    cancel_event: Optional[threading.Event] = None,
) -> None:
    """
    Set environment variables from all SSM parameters under a path.

    Args:
        path: Parameter hierarchy, e.g. "/my-app/prod". Empty is a no-op.
        client: Store client exposing iter_pages(path, with_decryption);
            defaults to an SSMParameterClient built from the config file
        environment: Store exposing set(name, value); defaults to the
            process environment
        cancel_event: Checked before every page request

    Raises:
        ConnectionConfigError: If the default client cannot be configured,
            including an invalid config file
        FetchPageError: If a page request fails
        EnvironmentWriteError: If a variable cannot be set
        LoadCancelled: If cancel_event is set before a page request

    Behavior:
        - Every parameter is requested with decryption (SecureString)
        - Variable name is the parameter name with the path removed
        - Parameters with a missing or empty name/value are skipped silently
        - Existing variables are overwritten
        - Not transactional: variables set before an error stay set
    """
    if path == "":
        return

    path = normalize_path(path)
    logger.debug(f"Loading parameters under {path}")

    if client is None:
        client = _default_client()
    if environment is None:
        environment = ProcessEnvironment()

    pages = iter(client.iter_pages(path, with_decryption=True))
    loaded = 0

    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise LoadCancelled(f"Loading parameters under {path} was cancelled")

        page = next(pages, None)
        if page is None:
            break

        for param in page:
            if param.name is None or param.value is None:
                continue

            # The query guarantees the prefix; anything else is not ours to map
            if not param.name.startswith(path):
                continue

            env_var_name = param.name[len(path):]
            if env_var_name == "" or param.value == "":
                continue

            environment.set(env_var_name, param.value)
            loaded += 1

    logger.info(f"Set {loaded} environment variable(s) from {path}")


def parse(path: str) -> None:
    """Set environment variables from SSM parameters under a path.

    Deprecated: use load_env_from_path.
    """
    return load_env_from_path(path)
