"""
pytest 全局 fixture
"""

import pytest
from loguru import logger

from packweave.models import BranchConfig, Modpack
from tests.fakes import FakeCatalogClient


@pytest.fixture(autouse=True)
def quiet_logger():
    """测试中只保留警告以上的日志"""
    logger.remove()
    logger.add(lambda _: None, level="WARNING")
    yield
    logger.remove()


@pytest.fixture
def client() -> FakeCatalogClient:
    return FakeCatalogClient()


@pytest.fixture
def modpack(tmp_path) -> Modpack:
    return Modpack(name="Test Pack", summary="A pack for tests", directory=tmp_path)


@pytest.fixture
def branch_config() -> BranchConfig:
    return BranchConfig()
