"""AWS SSM Parameter Store client wrapper."""
import logging
from typing import Iterator, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ConnectionConfigError, FetchPageError
from .models import AWSSettings, Parameter

logger = logging.getLogger(__name__)


class SSMParameterClient:
    """Wrapper around the boto3 SSM client."""

    def __init__(self, settings: Optional[AWSSettings] = None, session: Optional[boto3.session.Session] = None):
        self.settings = settings or AWSSettings()
        self._session = session
        self._client = None

    def connect(self) -> None:
        """
        Resolve credentials/region and create the SSM client.

        Uses the standard boto3 resolution chain (environment, shared
        config files, instance/container roles), narrowed by the profile
        and region from the config file when set.

        Raises:
            ConnectionConfigError: If the profile is unknown, no region can
                be resolved or the client cannot be built
        """
        if self._client is not None:
            return

        try:
            if self._session is None:
                self._session = boto3.session.Session(profile_name=self.settings.profile)
            self._client = self._session.client(
                "ssm",
                region_name=self.settings.region,
                config=self._botocore_config(),
            )
        except BotoCoreError as e:
            raise ConnectionConfigError(f"Failed to configure AWS SSM client: {e}") from e

        logger.debug(f"Connected to SSM in region {self._client.meta.region_name}")

    def _botocore_config(self) -> Config:
        # Retries are disabled: any failed page aborts the whole load
        options = {"retries": {"total_max_attempts": 1, "mode": "standard"}}
        if self.settings.connect_timeout is not None:
            options["connect_timeout"] = self.settings.connect_timeout
        if self.settings.read_timeout is not None:
            options["read_timeout"] = self.settings.read_timeout
        return Config(**options)

    @property
    def client(self):
        """Lazy-initialize client."""
        if self._client is None:
            self.connect()
        return self._client

    def iter_pages(self, path: str, with_decryption: bool = True) -> Iterator[List[Parameter]]:
        """
        Yield GetParametersByPath result pages one at a time.

        Pages are requested lazily: the next page is only fetched when the
        caller asks for it.

        Args:
            path: Parameter hierarchy to list (non-recursive)
            with_decryption: Decrypt SecureString values

        Raises:
            FetchPageError: If a page request fails
        """
        paginator = self.client.get_paginator("get_parameters_by_path")
        pages = iter(paginator.paginate(Path=path, WithDecryption=with_decryption))

        page_number = 1
        while True:
            try:
                page = next(pages)
            except StopIteration:
                return
            except (ClientError, BotoCoreError) as e:
                raise FetchPageError(path, page_number, e) from e

            yield [Parameter.from_api(entry) for entry in page.get("Parameters", [])]
            page_number += 1
