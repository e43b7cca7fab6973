"""
pactv3 exception classes
"""


class PactV3Exception(Exception):
    """
    Base pactv3 exception.
    """
    pass


class PactServiceException(PactV3Exception):
    """
    Raised by MockService.
    """
    pass


class InteractionSequenceException(PactV3Exception):
    """
    Raised by a strict InteractionBuilder when declarations are out of order.
    """
    pass


class PactTestFailure(PactV3Exception):
    """
    Raised by PactV3.execute_test when the test code or the mock server
    failed. The message is printable as is, ``outcome`` keeps the parts.
    """

    def __init__(self, outcome):
        super(PactTestFailure, self).__init__(outcome.message())
        self.outcome = outcome
