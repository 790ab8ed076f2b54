import pytest


@pytest.fixture(autouse=True)
def reset_service_container():
    """Each test starts with freshly built infrastructure services."""
    from infrastructure.container import container

    container.reset()
    yield
    container.reset()
