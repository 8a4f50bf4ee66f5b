import logging
import secrets

import pytest

from bessie import CHUNK_SIZE, KEY_SIZE, NONCE_SIZE, ChunkedAeadEngine
from bessie.core.config import BessieConfig

PLAINTEXT_SIZES = [
    0,
    1,
    CHUNK_SIZE - 1,
    CHUNK_SIZE,
    CHUNK_SIZE + 1,
    2 * CHUNK_SIZE,
    2 * CHUNK_SIZE + 1,
    50000,
]

FIXED_NONCE = bytes(range(NONCE_SIZE))


@pytest.fixture
def key() -> bytes:
    return secrets.token_bytes(KEY_SIZE)


@pytest.fixture
def engine() -> ChunkedAeadEngine:
    return ChunkedAeadEngine()


@pytest.fixture
def parallel_engine() -> ChunkedAeadEngine:
    return ChunkedAeadEngine(max_workers=4, parallel_min_chunks=2)


@pytest.fixture
def fixed_nonce_engines() -> tuple[ChunkedAeadEngine, ChunkedAeadEngine]:
    """Sequential and parallel engines that always use FIXED_NONCE."""
    source = lambda n: FIXED_NONCE
    return (
        ChunkedAeadEngine(nonce_source=source),
        ChunkedAeadEngine(max_workers=3, parallel_min_chunks=2, nonce_source=source),
    )


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger("bessie")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def _reset_config():
    BessieConfig.reset_instance()
    yield
    BessieConfig.reset_instance()
