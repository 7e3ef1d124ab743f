import logging
import os
import pathlib
import typing

from starlette.config import Config as BaseConfig
from starlette.config import Environ, undefined

from crumb.exceptions import ImproperlyConfigured

__all__ = ["Config", "Secrets", "get_secret_key"]

logger = logging.getLogger(__name__)

_T = typing.TypeVar("_T")


class Config(BaseConfig):
    """
    Configuration read from the environment and a stack of .env files.

    Files are applied in order so later files override earlier ones. Values
    from the environment take precedence over every file. Missing files are
    skipped, which allows optional overrides such as `.env.local`.
    """

    def __init__(
        self,
        env_files: typing.Iterable[str | os.PathLike[str]] = (),
        *,
        environ: typing.Mapping[str, str] | None = None,
        env_prefix: str = "",
    ) -> None:
        super().__init__(environ=environ if environ is not None else Environ(), env_prefix=env_prefix)
        for env_file in env_files:
            self.load_env_file(env_file)

    def load_env_file(self, env_file: str | os.PathLike[str]) -> bool:
        """Merge variables from the file. Returns False when the file does not exist."""
        path = pathlib.Path(env_file)
        if not path.is_file():
            logger.debug("Env file %s does not exist, skipping.", path)
            return False
        self.file_values.update(BaseConfig(path).file_values)
        return True


class Secrets:
    """An interface to access secret variables defined as files."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = pathlib.Path(directory)

    @typing.overload
    def get(self, key: str, default: None = None) -> str:  # pragma: no cover
        ...

    @typing.overload
    def get(self, key: str, default: _T) -> str | _T:  # pragma: no cover
        ...

    def get(self, key: str, default: typing.Any = undefined) -> typing.Any:
        file_name = self.directory / key
        if not file_name.exists():
            if default is undefined:
                raise FileNotFoundError(f"Secret file missing and no default value provided: {file_name}.")
            return default

        # editors and orchestrators tend to leave a trailing newline
        return file_name.read_text().strip()

    __call__ = get


def get_secret_key(config: Config, name: str = "APP_KEY", secrets: Secrets | None = None) -> str:
    """
    Read the cookie signing key.

    The environment (or .env files) wins over the secrets directory.
    """
    value = config.get(name, default="")
    if not value and secrets is not None:
        value = secrets.get(name, "")
    if not value:
        raise ImproperlyConfigured(f'Signing key is not configured. Set "{name}" variable.')
    return value
