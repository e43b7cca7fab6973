import mock
import pytest

import pactv3


PROVIDER_NAME = "My Service Provider"


@pytest.mark.parametrize("args,kwargs", [
    ([PROVIDER_NAME], {}),
    ([], {'name': PROVIDER_NAME}),
])
def test_provider_creation(args, kwargs):
    provider = pactv3.Provider(*args, **kwargs)

    assert provider.name == PROVIDER_NAME


def test_provider_names_the_pact_and_its_engine():
    engine_cls = mock.Mock()
    provider = pactv3.Provider(PROVIDER_NAME)

    pact = pactv3.Consumer("My Service Consumer").has_pact_with(
        provider, '/tmp/pacts', engine_cls=engine_cls)

    assert pact.provider_name == PROVIDER_NAME
    engine_cls.assert_called_once_with("My Service Consumer", PROVIDER_NAME)
