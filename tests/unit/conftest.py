import os
from pathlib import Path
from typing import Generator

import dotenv
import pytest

from rangecrypt.reader.keys import derive_key_material
from rangecrypt.reader.keys import encode_key_token
from rangecrypt.reader.types import KeyMaterial


@pytest.fixture(scope="session", autouse=True)
def _load_test_env() -> Generator[None, None, None]:
    """Load test environment variables from base + local env files."""
    project_root = Path(__file__).parents[2]
    dotenv.load_dotenv(project_root / ".env.defaults", override=True)
    dotenv.load_dotenv(project_root / ".env.test-local", override=True)
    os.environ["ENVIRONMENT"] = "test"
    yield


@pytest.fixture
def raw_token() -> bytes:
    return bytes(range(32))


@pytest.fixture
def key_token(raw_token: bytes) -> str:
    return encode_key_token(raw_token)


@pytest.fixture
def key_material(key_token: str) -> KeyMaterial:
    return derive_key_material(key_token)
