"""Top-level Intercom client, configuration and logging setup."""

import logging
import os
import pathlib

import pydantic
import structlog

from . import restapi
from .resources import users

CONFIG_ENV_VAR = "INTERCOM_CLIENT_CONFIG_PATH"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for the Intercom client."""

    base_url: str = pydantic.Field(
        restapi.DEFAULT_BASE_URL,
        description="Base URL for the Intercom REST API",
        min_length=1,
    )
    access_token: str | None = pydantic.Field(
        None,
        description="Intercom access token",
    )
    access_token_file: str | None = pydantic.Field(
        None,
        description="Path to file containing the access token",
    )
    api_version: str = pydantic.Field(
        restapi.DEFAULT_API_VERSION,
        description="Intercom API version sent in the Intercom-Version header",
    )
    timeout: float = pydantic.Field(
        restapi.DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


SENSITIVE_LOG_KEYS = frozenset({"access_token", "authorization", "token"})


def redact_secrets(_logger, _method_name, event_dict):
    """Mask credential values in a log event."""
    for key in SENSITIVE_LOG_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output with credentials masked."""
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            redact_secrets,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str) -> ClientConfig:
    """Load and validate configuration from a JSON file."""
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    return ClientConfig.model_validate_json(path.read_text())


class IntercomClient:
    """Entry point bundling one request handler with the resource accessors.

    Accessors are built once and share the handler for the lifetime of the
    client::

        with IntercomClient(ClientConfig(access_token="...")) as client:
            user = client.users.get("5714dd359a3fd47136000001")
    """

    def __init__(
        self,
        config: ClientConfig,
        request_handler: restapi.RequestHandler | None = None,
    ):
        self.config = config
        self.request_handler = request_handler or restapi.RequestHandler(
            base_url=config.base_url,
            access_token=config.access_token,
            token_file=config.access_token_file,
            api_version=config.api_version,
            timeout=config.timeout,
        )
        self.users = users.UserResourceClient(self.request_handler)
        logger.info(
            "Created Intercom client",
            base_url=self.request_handler.base_url,
            api_version=config.api_version,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the underlying request handler."""
        self.request_handler.close()


def create_client(config_path: str | None = None) -> IntercomClient:
    """Create a client using a config path or environment default."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, "intercom.json")
    config = load_config(resolved_path)
    configure_logging(config.log_level)
    return IntercomClient(config)
