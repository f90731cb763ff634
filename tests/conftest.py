import pytest
import structlog

from todoist_org.models import Task


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_task():
    def _make(id, parent_id=None, content="", description=""):
        return Task(id=id, parent_id=parent_id, content=content or f"task {id}", description=description)
    return _make
