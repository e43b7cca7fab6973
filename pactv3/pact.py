"""Runs consumer tests against a mock server built from the declared interactions"""
import asyncio
import inspect
import logging

from .exceptions import PactTestFailure, PactV3Exception
from .interaction import InteractionBuilder
from .result import TestOutcome
from .service import MockService


logger = logging.getLogger(__name__)


class PactV3(InteractionBuilder):
    """
        The interactions between one consumer and one provider, and the means
        to test the consumer against them.

        Args:
            output_dir: directory the pact file is written to after a passing test
            consumer_name, provider_name: the two sides of the pact
            engine: the verification engine, by default
                ``engine_cls(consumer_name, provider_name, **engine_options)``
            strict (bool): reject out of order interaction declarations
    """

    def __init__(self, output_dir, consumer_name, provider_name, engine=None,
                 engine_cls=MockService, strict=False, **engine_options):
        if engine is None:
            engine = engine_cls(consumer_name, provider_name, **engine_options)
        super(PactV3, self).__init__(engine, strict=strict)

        self.output_dir = output_dir
        self.consumer_name = consumer_name
        self.provider_name = provider_name

    def execute_test(self, test_fn):
        """
            Run ``test_fn(mock_server)`` against a freshly started mock server.

            Return what ``test_fn`` returned once the mock server matched every
            interaction and the pact file is written. Raise PactTestFailure
            when the test code raised or the mock server reported a problem.
        """
        run = self._start(test_fn)
        try:
            try:
                value = run.test_result()
            except Exception as exc:
                self._fail_with(run, exc)
            if inspect.isawaitable(value):
                self._refuse_awaitable(value)
            return self._verify(run, value)
        finally:
            self._shutdown(run)

    async def execute_test_async(self, test_fn):
        """
            Same as execute_test for a test function returning an awaitable.

            The engine calls block, they run in the loop's default executor.
        """
        loop = asyncio.get_running_loop()
        run = await loop.run_in_executor(None, self._start, test_fn)
        try:
            try:
                value = run.test_result()
                if inspect.isawaitable(value):
                    value = await value
            except Exception as exc:
                await loop.run_in_executor(None, self._fail_with, run, exc)
            return await loop.run_in_executor(None, self._verify, run, value)
        finally:
            await loop.run_in_executor(None, self._shutdown, run)

    def _refuse_awaitable(self, value):
        close = getattr(value, 'close', None)
        if close is not None:
            close()
        raise PactV3Exception(
            'The test function returned an awaitable, run it with execute_test_async.')

    def _start(self, test_fn):
        run = self.engine.execute_test(test_fn)
        if run.test_result is None:
            logger.error('Mock server for %s -> %s did not start: %s',
                         self.consumer_name, self.provider_name, run.test_error)
            self._shutdown(run)
            if run.test_error is None:
                raise PactV3Exception('The mock server did not start.')
            raise run.test_error
        return run

    def _verify(self, run, value):
        outcome = TestOutcome.from_result(self.engine.get_test_result(run.mock_server.id))
        if outcome.failed:
            raise PactTestFailure(outcome)

        self.engine.write_pact_file(run.mock_server.id, self.output_dir)
        return value

    def _fail_with(self, run, exc):
        try:
            result = self.engine.get_test_result(run.mock_server.id)
        except Exception:
            logger.exception('Could not fetch the result of mock server %s', run.mock_server.id)
            result = None
        raise PactTestFailure(TestOutcome.from_result(result, test_error=exc)) from exc

    def _shutdown(self, run):
        try:
            self.engine.shutdown_test(run)
        except Exception:
            logger.warning('Shutting down the mock server failed', exc_info=True)
