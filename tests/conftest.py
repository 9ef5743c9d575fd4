import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_configure(config):
    """Select the config overlay before the domain module is imported."""
    os.environ["PROTEAN_ENV"] = config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import load_elements, storefront

    load_elements()
    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _adapters():
    """Every test starts with a fresh fake gateway, fake media store and lenient transitions."""
    from storefront.media import reset_media_store
    from storefront.ordering.order.transitions import TransitionPolicy, reset_policy, set_policy
    from storefront.payments.gateway import reset_gateway, set_gateway
    from storefront.payments.gateway.fake_adapter import FakeGateway

    set_gateway(FakeGateway())
    set_policy(TransitionPolicy(strict=False))
    reset_media_store()
    yield
    reset_gateway()
    reset_policy()
    reset_media_store()


@pytest.fixture
def make_product():
    """Factory that lists a product through the CreateProduct command and returns its id."""
    import json

    from protean import current_domain
    from storefront.catalogue.product.management import CreateProduct

    def _make(seller_id="seller-1", name="Widget", price=100.0, **fields):
        for name_ in ("variants", "colors", "media"):
            if name_ in fields and not isinstance(fields[name_], str):
                fields[name_] = json.dumps(fields[name_])
        command = CreateProduct(seller_id=seller_id, name=name, price=price, **fields)
        return current_domain.process(command, asynchronous=False)

    return _make


@pytest.fixture
def gateway():
    from storefront.payments.gateway import get_gateway

    return get_gateway()


@pytest.fixture
def media_store():
    from storefront.media import get_media_store

    return get_media_store()
