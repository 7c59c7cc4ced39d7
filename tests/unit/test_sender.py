"""Tests for the Sender facade."""

import pytest

from mediator import (
    CancellationToken,
    CommandHandler,
    InvalidArgumentError,
    ISender,
    QueryHandler,
    RequestDispatcher,
    Sender,
)
from tests.helpers.providers import StaticServiceProvider
from tests.helpers.requests import (
    GetGreeting,
    GetGreetingHandler,
    PlaceOrder,
    PlaceOrderHandler,
    RecordingDispatcher,
)


@pytest.mark.unit
class TestSender:
    """Test that Sender forwards to its dispatcher unchanged."""

    def test_requires_dispatcher(self) -> None:
        """Test that a missing dispatcher is rejected."""
        with pytest.raises(InvalidArgumentError):
            Sender(None)  # type: ignore[arg-type]

    def test_satisfies_sender_protocol(self) -> None:
        """Test that Sender can stand in for ISender."""
        assert isinstance(Sender(RecordingDispatcher()), ISender)

    async def test_send_command_delegates_to_dispatcher(self) -> None:
        """Test command forwarding, including request identity."""
        dispatcher = RecordingDispatcher()
        sender = Sender(dispatcher)
        command = PlaceOrder()

        result = await sender.send(command)

        assert result is None
        assert dispatcher.command_sent is True
        assert dispatcher.last_request is command

    async def test_send_query_delegates_to_dispatcher(self) -> None:
        """Test query forwarding and that the dispatcher result is returned."""
        dispatcher = RecordingDispatcher(query_result="ok")
        sender = Sender(dispatcher)
        query = GetGreeting()

        result = await sender.send(query)

        assert dispatcher.query_sent is True
        assert dispatcher.last_request is query
        assert result == "ok"

    async def test_forwards_cancellation_and_result_type(self) -> None:
        """Test that the token and result type pass through untouched."""
        dispatcher = RecordingDispatcher()
        sender = Sender(dispatcher)
        token = CancellationToken()

        await sender.send(GetGreeting(), token, result_type=str)

        assert dispatcher.last_cancellation is token
        assert dispatcher.last_result_type is str

    async def test_end_to_end_with_request_dispatcher(
        self, provider: StaticServiceProvider
    ) -> None:
        """Test Sender over a real dispatcher."""
        command_handler = PlaceOrderHandler()
        provider.add_service(CommandHandler[PlaceOrder], command_handler)
        provider.add_service(QueryHandler[GetGreeting, str], GetGreetingHandler("hey"))
        sender = Sender(RequestDispatcher(provider))

        await sender.send(PlaceOrder())
        result = await sender.send(GetGreeting())

        assert len(command_handler.calls) == 1
        assert result == "hey"
