from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Type

import requests

from ..domain.errors import DependencyTimeoutError
from .config import env_float


def http_timeout_seconds() -> float:
    value = env_float("DOCVEC_HTTP_TIMEOUT", 15.0)
    return value if value > 0 else 15.0


@contextmanager
def provider_call(dependency: str, error_cls: Type[Exception], timeout: float) -> Iterator[None]:
    """Translate requests failures raised inside the block into domain errors.

    requests.Timeout becomes DependencyTimeoutError; any other RequestException
    (connection errors, HTTP status errors, invalid JSON) becomes ``error_cls``.
    """
    try:
        yield
    except requests.Timeout as ex:
        raise DependencyTimeoutError(dependency, timeout) from ex
    except requests.RequestException as ex:
        raise error_cls(f"{dependency} request failed: {ex}") from ex
