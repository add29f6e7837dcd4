"""
Optional JSON secrets file for deployments without a secret store.

The file maps environment variable names (``REDDIT__CLIENT_ID`` and so on) to
scalar values. Variables that are already set always win over the file.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

LOGGER = logging.getLogger(__name__)

SECRETS_PATH_VARIABLE = "HNMIRROR_SECRETS_PATH"

REQUIRED_SECRETS = {
    "REDDIT__CLIENT_ID": "Reddit API client id",
    "REDDIT__CLIENT_SECRET": "Reddit API client secret",
    "REDDIT__PASSWORD": "Password of the posting Reddit account",
}

_SCALARS = (str, int, float, bool)


def _read_secrets_file(path: Path) -> dict[str, str]:
    """Return the scalar entries of ``path``; an unusable file yields nothing."""

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.error("Failed to load secrets file %s: %s", path, exc)
        return {}

    if not isinstance(data, dict):
        LOGGER.error("Secrets file %s must contain a top-level JSON object.", path)
        return {}

    secrets: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(value, _SCALARS):
            LOGGER.warning("Ignoring non-scalar secret %s in %s", key, path)
            continue
        secrets[key] = str(value)
    return secrets


def missing_secrets(required_keys: Iterable[str]) -> list[str]:
    """Names from ``required_keys`` that are not set in the environment."""

    return sorted(key for key in required_keys if not os.environ.get(key))


def load_runtime_secrets(
    *,
    secrets_path: str | None = None,
    required_keys: Mapping[str, str] | None = None,
) -> int:
    """
    Export the secrets file into ``os.environ`` and return how many
    variables were set.

    The path defaults to ``$HNMIRROR_SECRETS_PATH``. Missing entries of
    ``required_keys`` are reported with a warning, never raised: the Reddit
    client refuses to start without credentials anyway.
    """

    path_value = secrets_path or os.environ.get(SECRETS_PATH_VARIABLE)
    loaded = 0

    if not path_value:
        LOGGER.info("%s not set; relying on existing env vars.", SECRETS_PATH_VARIABLE)
    else:
        path = Path(path_value).expanduser()
        if path.exists():
            for key, value in _read_secrets_file(path).items():
                if key in os.environ:
                    continue
                os.environ[key] = value
                loaded += 1
            LOGGER.info("Loaded %d secrets from %s", loaded, path)
        else:
            LOGGER.warning("Secrets file not found at %s. Skipping load.", path)

    missing = missing_secrets(required_keys or ())
    if missing:
        LOGGER.warning(
            "Missing required secrets: %s. Set them in the environment or in %s.",
            ", ".join(missing),
            SECRETS_PATH_VARIABLE,
        )
    return loaded


__all__ = ["REQUIRED_SECRETS", "load_runtime_secrets", "missing_secrets"]
