"""
Tests for mockdispatch Dispatcher

Tests resolution of incoming requests including:
- Default 404 response
- Local before global precedence
- First match wins and short-circuits
- Tombstoned slots
- Absorbed unknown matcher/resolver shapes
- Computed responses with unusable results
"""

import logging

import pytest
import requests
from unittest.mock import Mock

from mockdispatch.mock.config import DispatchConfig
from mockdispatch.mock.dispatcher import Dispatcher
from mockdispatch.mock.matcher import Predicate
from mockdispatch.mock.resolver import PASSTHROUGH, StaticResponse
from mockdispatch.mock.responses import make_httpx_response, make_response
from mockdispatch.mock.session import RequestsBinding
from mockdispatch.mock.table import MappingEntry, MappingTable


def get(url):
    return requests.Request('GET', url).prepare()


@pytest.fixture
def dispatcher():
    return Dispatcher(RequestsBinding())


@pytest.fixture
def local_table():
    return MappingTable(name="local")


@pytest.fixture
def global_table():
    return MappingTable(name="global")


class TestDefaultResponse:
    """Test the fallback when nothing matches."""

    def test_empty_tables(self, dispatcher, local_table, global_table):
        response = dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

        assert response.status_code == 404
        assert response.content == b''
        assert response.reason == 'Not Found'

    def test_default_is_identical_every_time(self, dispatcher, local_table, global_table):
        first = dispatcher.dispatch(get('http://a.ru'), local_table, global_table)
        second = dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

        assert (first.status_code, first.content, dict(first.headers)) == \
            (second.status_code, second.content, dict(second.headers))

    def test_unmatched_request(self, dispatcher, local_table, global_table):
        local_table.add('http://a.ru', make_response(201))

        assert dispatcher.dispatch(get('http://b.ru'), local_table, global_table).status_code == 404

    def test_unmatched_logged_at_debug(self, dispatcher, local_table, global_table, caplog):
        with caplog.at_level(logging.WARNING):
            dispatcher.dispatch(get('http://b.ru'), local_table, global_table)

        assert caplog.records == []

    def test_unmatched_logged_as_warning(self, local_table, global_table, caplog):
        dispatcher = Dispatcher(RequestsBinding(), DispatchConfig(log_unmatched=True))

        with caplog.at_level(logging.WARNING):
            dispatcher.dispatch(get('http://b.ru'), local_table, global_table)

        assert "No mapping found for GET http://b.ru/" in caplog.text


class TestPrecedence:
    """Test ordering of candidate mappings."""

    def test_local_before_global(self, dispatcher, local_table, global_table):
        global_table.add('http://a.ru', make_response(400))
        local_table.add('http://a.ru', make_response(403))

        assert dispatcher.dispatch(get('http://a.ru'), local_table, global_table).status_code == 403

    def test_global_fallback(self, dispatcher, local_table, global_table):
        global_table.add('http://a.ru', make_response(400))
        local_table.add('http://b.ru', make_response(403))

        assert dispatcher.dispatch(get('http://a.ru'), local_table, global_table).status_code == 400

    def test_first_registered_wins(self, dispatcher, local_table, global_table):
        local_table.add('http://a.ru', make_response(200))
        local_table.add('http://a.ru', make_response(201))

        assert dispatcher.dispatch(get('http://a.ru'), local_table, global_table).status_code == 200

    def test_later_entries_not_evaluated(self, dispatcher, local_table, global_table):
        later_local = Mock(return_value=True)
        later_global = Mock(return_value=True)
        local_table.add('http://a.ru', make_response(200))
        local_table.add(later_local, make_response(201))
        global_table.add(later_global, make_response(202))

        dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

        later_local.assert_not_called()
        later_global.assert_not_called()

    def test_tombstone_skipped(self, dispatcher, local_table, global_table):
        first = local_table.add('http://a.ru', make_response(200))
        local_table.add('http://a.ru', make_response(201))
        local_table.remove(first)

        assert dispatcher.dispatch(get('http://a.ru'), local_table, global_table).status_code == 201

    def test_dispatch_does_not_mutate_tables(self, dispatcher, local_table, global_table):
        local_table.add('http://a.ru', make_response(200))
        global_table.add('http://b.ru', make_response(201))
        local_before, global_before = local_table.entries(), global_table.entries()

        dispatcher.dispatch(get('http://a.ru'), local_table, global_table)
        dispatcher.dispatch(get('http://c.ru'), local_table, global_table)

        assert local_table.entries() == local_before
        assert global_table.entries() == global_before
        assert (len(local_table), len(global_table)) == (1, 1)


class TestResolution:
    """Test resolving matched entries."""

    def test_computed_gets_matched_request(self, dispatcher, local_table, global_table):
        response = make_response(299)
        func = Mock(return_value=response)
        local_table.add('http://a.ru', func)
        request = get('http://a.ru')

        result = dispatcher.dispatch(request, local_table, global_table)

        func.assert_called_once_with(request)
        assert result is response

    def test_computed_bad_result(self, dispatcher, local_table, global_table, caplog):
        local_table.add('http://a.ru', lambda request: None)

        with caplog.at_level(logging.WARNING):
            response = dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

        assert response.status_code == 404
        assert "Unknown type of predefined response: NoneType" in caplog.text

    def test_response_of_other_client(self, dispatcher, local_table, global_table, caplog):
        local_table.add('http://a.ru', make_httpx_response(200))

        with caplog.at_level(logging.WARNING):
            response = dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

        assert isinstance(response, requests.Response)
        assert response.status_code == 404

    def test_predicate_exception_propagates(self, dispatcher, local_table, global_table):
        def broken(request):
            raise ValueError("bad predicate")

        local_table.add(broken, make_response(200))

        with pytest.raises(ValueError, match="bad predicate"):
            dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

    def test_computed_exception_propagates(self, dispatcher, local_table, global_table):
        def broken(request):
            raise ValueError("bad resolver")

        local_table.add('http://a.ru', broken)

        with pytest.raises(ValueError, match="bad resolver"):
            dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

    def test_passthrough(self, dispatcher, local_table, global_table):
        real = make_response(200, b'real')
        send_original = Mock(return_value=real)
        local_table.add_passthrough('http://a.ru')
        request = get('http://a.ru')

        assert dispatcher.dispatch(request, local_table, global_table, send_original) is real
        send_original.assert_called_once_with(request)

    def test_passthrough_without_transport(self, dispatcher, local_table, global_table, caplog):
        local_table.add_passthrough('http://a.ru')

        with caplog.at_level(logging.WARNING):
            response = dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

        assert response.status_code == 404
        assert "no real transport" in caplog.text


class TestUnknownShapes:
    """Test entries that bypassed validation."""

    def test_unknown_matcher_skipped(self, dispatcher, local_table, global_table, caplog):
        local_table._slots.append(MappingEntry('http://a.ru', StaticResponse(make_response(200))))
        local_table.add('http://a.ru', make_response(201))

        with caplog.at_level(logging.WARNING):
            response = dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

        assert response.status_code == 201
        assert "Unknown type of predefined request: str" in caplog.text

    def test_unknown_resolver(self, dispatcher, local_table, global_table, caplog):
        local_table._slots.append(MappingEntry(Predicate(lambda r: True), make_response(200)))

        with caplog.at_level(logging.WARNING):
            response = dispatcher.dispatch(get('http://a.ru'), local_table, global_table)

        assert response.status_code == 404
        assert "Unknown type of predefined response: Response" in caplog.text

    def test_passthrough_entry_type(self, local_table):
        local_table.add_passthrough('http://a.ru')

        assert local_table.entries()[0].resolver is PASSTHROUGH
