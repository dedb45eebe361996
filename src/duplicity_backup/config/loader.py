"""Configuration file loader

The file is rendered as a Jinja2 template before it is parsed as YAML, so
secrets can be kept out of the file itself:

    encryption:
      enable: true
      passphrase: {{ env("BACKUP_PASSPHRASE") }}
    logdir: {{ env("BACKUP_LOGDIR", "/var/log/duplicity") }}
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Callable, Mapping, Optional, Union

import jinja2
import pydantic
import yaml

from duplicity_backup.config.env_loader import EnvLoader
from duplicity_backup.config.model import BackupConfig
from duplicity_backup.exceptions import ConfigurationError, ConfigValidationError

ConfigSource = Union[str, Path, bytes, IO[bytes], IO[str]]


def make_env_lookup(env: Mapping[str, str]) -> Callable[..., str]:
    """Build the ``env(name, default="")`` template function"""

    def env_lookup(name: str, default: str = "") -> str:
        if name in env:
            return env[name]
        return default

    return env_lookup


def render_template(content: str, env: Mapping[str, str]) -> str:
    """Render configuration text, resolving ``env()`` calls against env

    Raises:
        ConfigurationError: If the template cannot be parsed or rendered
    """
    environment = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    environment.globals["env"] = make_env_lookup(env)

    try:
        return environment.from_string(content).render()
    except jinja2.TemplateError as e:
        raise ConfigurationError(
            "TEMPLATE_ERROR", f"rendering config file template: {e}"
        ) from e


def _read_source(source: ConfigSource) -> str:
    if isinstance(source, bytes):
        return source.decode("utf-8")
    if isinstance(source, (str, Path)):
        try:
            return Path(source).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                "CONFIG_UNREADABLE",
                f"Unable to open configuration file {source}: {e}",
            ) from e

    content = source.read()
    if isinstance(content, bytes):
        return content.decode("utf-8")
    return content


def load_config(
    source: ConfigSource,
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[Union[str, Path]] = None,
) -> BackupConfig:
    """Load and validate a configuration

    Args:
        source: Path to the YAML file, its raw bytes, or an open file
        env: Variables for ``env()`` lookups, overriding env_file and os.environ
        env_file: Optional .env file with the lowest precedence

    Returns:
        Validated, frozen BackupConfig

    Raises:
        ConfigurationError: File unreadable, bad template or bad YAML
        ConfigValidationError: Content violates a configuration rule
    """
    content = _read_source(source)

    variables = EnvLoader(env_file).load(overrides=env)
    rendered = render_template(content, variables)

    try:
        data = yaml.safe_load(rendered)
    except yaml.YAMLError as e:
        raise ConfigurationError("YAML_ERROR", f"unmarshalling config: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigValidationError(
            "INVALID_CONFIG",
            "validating config: top level of the configuration must be a mapping",
        )

    try:
        config = BackupConfig.model_validate(data)
    except pydantic.ValidationError as e:
        raise ConfigValidationError("INVALID_CONFIG", f"validating config: {e}") from e

    return config.check_rules()
