"""Catalog store configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from .env import first_env_var
from .errors import ConfigurationError, MissingConfigurationError

CATALOG_URL_VARS: Final[tuple[str, ...]] = ("CATALOG_DATABASE_URL", "DATABASE_URL")
CATALOG_CREDENTIAL_VAR: Final[str] = "CATALOG_WRITE_CREDENTIAL"


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """Location of the catalog store plus the privileged write credential."""

    url: str
    write_credential: str

    def engine_url(self) -> URL:
        """Return the SQLAlchemy URL with the write credential applied.

        File-backed SQLite stores have no notion of a password, so the credential
        is only injected for server databases.
        """

        try:
            url = make_url(self.url)
        except ArgumentError as exc:
            raise ConfigurationError(f"Invalid catalog store URL: {self.url!r}") from exc
        if url.get_backend_name() == "sqlite":
            return url
        return url.set(password=self.write_credential)


def get_catalog_config() -> CatalogConfig:
    url = first_env_var(CATALOG_URL_VARS)
    credential = first_env_var((CATALOG_CREDENTIAL_VAR,))
    if url is None or credential is None:
        missing = [
            name
            for name, value in ((CATALOG_URL_VARS[0], url), (CATALOG_CREDENTIAL_VAR, credential))
            if value is None
        ]
        raise MissingConfigurationError(f"Missing configuration for: {', '.join(missing)}")
    return CatalogConfig(url=url, write_credential=credential)
