"""Tests for request markers and result type resolution."""

from typing import Generic, TypeVar

import pytest

from mediator import Command, Query, Request
from mediator.contracts import resolve_result_type
from mediator.exceptions import InvalidArgumentError
from tests.helpers.requests import CountItems, GetFormalGreeting, GetGreeting, PlaceOrder


T = TypeVar("T")


class Page(Query[list[T]], Generic[T]):
    pass


class UntypedQuery(Query):  # type: ignore[type-arg]
    pass


@pytest.mark.unit
class TestRequestMarkers:
    """Test the request marker hierarchy."""

    def test_commands_and_queries_are_requests(self) -> None:
        assert isinstance(PlaceOrder(), Request)
        assert isinstance(GetGreeting(), Request)

    def test_commands_are_not_queries(self) -> None:
        assert not isinstance(PlaceOrder(), Query)
        assert not isinstance(GetGreeting(), Command)


@pytest.mark.unit
class TestResolveResultType:
    """Test resolve_result_type."""

    def test_declared_result_type(self) -> None:
        """Test that Query[R] declares R."""
        assert resolve_result_type(GetGreeting) is str
        assert resolve_result_type(CountItems) is int

    def test_inherited_result_type(self) -> None:
        """Test that subclasses inherit the declared result type."""
        assert resolve_result_type(GetFormalGreeting) is str

    def test_generic_result_type(self) -> None:
        """Test parameterised result types."""

        class Numbers(Query[list[int]]):
            pass

        assert resolve_result_type(Numbers) == list[int]

    def test_unparameterised_query_is_rejected(self) -> None:
        """Test that a bare Query subclass has no resolvable result type."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            resolve_result_type(UntypedQuery)

        assert exc_info.value.argument == "result_type"

    def test_type_variable_result_is_rejected(self) -> None:
        """Test that an unspecialised generic query needs an explicit type."""
        with pytest.raises(InvalidArgumentError):
            resolve_result_type(Page)
