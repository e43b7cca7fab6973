"""
pactv3

Consumer side of a consumer driven contract testing library.
"""

from .consumer import Consumer
from .exceptions import PactTestFailure
from .interaction import InteractionBuilder
from .pact import PactV3
from .provider import Provider
from .service import MockServer


__all__ = ['Consumer', 'Provider', 'PactV3', 'InteractionBuilder', 'MockServer',
           'PactTestFailure']
