"""Provides API for managing service consumers"""
from .pact import PactV3


class Consumer(object):

    def __init__(self, name, pact_cls=PactV3):
        self.name = name
        self.pact_cls = pact_cls

    def has_pact_with(self, provider, output_dir, **kwargs):
        return self.pact_cls(
            output_dir=output_dir,
            consumer_name=self.name,
            provider_name=getattr(provider, 'name', provider),
            **kwargs)
