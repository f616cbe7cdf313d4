from typing import Iterator

import pytest

from dynareg import Context, default_context


@pytest.fixture(autouse=True)
def clean_default_context() -> Iterator[Context]:
    ctx = default_context()
    ctx.reset()
    yield ctx
    ctx.reset()


@pytest.fixture
def context() -> Context:
    return Context()
