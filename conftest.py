import pytest

import rubik_prune_db as rpd


@pytest.fixture(scope="session")
def tables():
    # the six solver tables, built once per test session
    return rpd.default_tables().build()
