from __future__ import annotations

import logging
from typing import Any

import boto3

from ...core import Provider
from ._models import DynamoOption

DEFAULT_REGION = "ap-northeast-2"


class DynamoProvider(Provider):
    option: DynamoOption
    region: str | None
    profile_name: str | None
    aws_access_key_id: str | None
    aws_secret_access_key: str | None
    aws_session_token: str | None
    nparams: dict[str, Any]

    _resource: Any

    def __init__(
        self,
        option: DynamoOption | dict | None = None,
        region: str | None = None,
        profile_name: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        nparams: dict[str, Any] = dict(),
        logger: logging.Logger | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            option:
                Table options (table_name, id_name, sort_name,
                id_type, sort_type). Options can also be
                passed as keyword arguments.
            region:
                AWS region name, defaults to ap-northeast-2.
            profile_name:
                AWS profile name.
            aws_access_key_id:
                AWS access key id.
            aws_secret_access_key:
                AWS secret access key.
            aws_session_token:
                AWS session token.
            nparams:
                Native parameters to boto3 resource.
            logger:
                Logger to use, defaults to the module logger.
        """
        super().__init__(logger=logger)
        self.option = DynamoOption.build(option, **kwargs)
        self.region = region or DEFAULT_REGION
        self.profile_name = profile_name
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.aws_session_token = aws_session_token
        self.nparams = nparams

        self._resource = None
        option = self.option
        self._logger.info(
            "%s(%s/%s%s)...",
            self.__class__.__name__,
            option.table_name,
            option.id_name,
            f"/{option.sort_name}" if option.sort_name else "",
        )

    def __setup__(self) -> None:
        if self._resource is not None:
            return

        if self.profile_name is not None:
            session = boto3.Session(profile_name=self.profile_name)
            resource = session.resource(
                "dynamodb",
                region_name=self.region,
                **self.nparams,
            )
        elif (
            self.aws_access_key_id is not None
            and self.aws_secret_access_key is not None
        ):
            resource = boto3.resource(
                "dynamodb",
                region_name=self.region,
                aws_access_key_id=self.aws_access_key_id,
                aws_secret_access_key=self.aws_secret_access_key,
                aws_session_token=self.aws_session_token,
                **self.nparams,
            )
        else:
            resource = boto3.resource(
                "dynamodb",
                region_name=self.region,
                **self.nparams,
            )
        self._resource = resource

    @property
    def resource(self) -> Any:
        self.__setup__()
        return self._resource

    @property
    def table(self) -> Any:
        return self.resource.Table(self.option.table_name)

    @property
    def client(self) -> Any:
        return self.resource.meta.client
