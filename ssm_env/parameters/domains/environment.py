"""Environment variable stores."""
import os
from typing import Dict, Optional

from .errors import EnvironmentWriteError


class ProcessEnvironment:
    """Process environment backed by os.environ."""

    def get(self, name: str) -> Optional[str]:
        return os.environ.get(name)

    def set(self, name: str, value: str) -> None:
        """
        Set a variable, overwriting any existing value.

        Raises:
            EnvironmentWriteError: If the OS rejects the name or value
                (e.g. embedded NUL byte, '=' in the name)
        """
        try:
            os.environ[name] = value
        except (ValueError, OSError) as e:
            raise EnvironmentWriteError(name, e) from e


class MappingEnvironment:
    """In-memory environment, used by 'ssm-env list' and in tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.variables: Dict[str, str] = dict(initial or {})

    def get(self, name: str) -> Optional[str]:
        return self.variables.get(name)

    def set(self, name: str, value: str) -> None:
        self.variables[name] = value
