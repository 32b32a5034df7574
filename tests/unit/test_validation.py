"""
Unit tests for request validation.

This module tests that query, body and headers are validated with Pydantic
schemas, that failures become 400 responses and that normalized values are
visible to the wrapped handler.
"""

import json
from typing import Annotated, Literal
from unittest.mock import Mock

import pytest
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

from rest_api.handlers.rest import with_rest
from rest_api.handlers.utils.errors import HttpError
from rest_api.handlers.validation import build_request_schema, format_validation_error, with_validation
from rest_api.models.request import ApiRequest

Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]


class FooIsBar(BaseModel):
    foo: Literal["bar"]


class JsonContentType(BaseModel):
    model_config = ConfigDict(extra="allow")

    content_type: Annotated[str, Field(alias="content-type", pattern=r"^application/json\b")]


class TrimmedFoo(BaseModel):
    foo: Trimmed | None = None


class TrimmedHeaders(BaseModel):
    model_config = ConfigDict(extra="allow")

    x_foo: Annotated[Trimmed | None, Field(alias="x-foo")] = None


class Pagination(BaseModel):
    page: Annotated[int, Field(ge=1)] = 1


class TestValidationErrors:
    """Test cases for invalid requests."""

    def test_validates_body(self, dispatch):
        app = with_rest({"POST": with_validation({"body": FooIsBar})(lambda req, res: req.body)})

        response = dispatch(app, ApiRequest("POST", body={}))

        assert response.status_code == 400
        assert json.loads(response.body) == {
            "statusCode": 400,
            "error": "Bad Request",
            "message": '"body.foo" is required',
        }

    def test_validates_query(self, dispatch):
        app = with_rest({"GET": with_validation({"query": FooIsBar})(lambda req, res: {"hello": "world"})})

        response = dispatch(app, ApiRequest("GET"))

        assert response.status_code == 400
        assert json.loads(response.body) == {
            "statusCode": 400,
            "error": "Bad Request",
            "message": '"query.foo" is required',
        }

    def test_validates_literal_value(self, dispatch):
        app = with_rest({"GET": with_validation({"query": FooIsBar})(lambda req, res: None)})

        response = dispatch(app, ApiRequest("GET", query={"foo": "baz"}))

        assert response.status_code == 400
        assert json.loads(response.body)["message"] == "\"query.foo\" must be 'bar'"

    def test_validates_headers(self, dispatch):
        app = with_rest({"POST": with_validation({"headers": JsonContentType})(lambda req, res: req.body)})

        response = dispatch(app, ApiRequest("POST", headers={"Content-Type": "text/plain"}, body="foo"))

        assert response.status_code == 400
        assert json.loads(response.body) == {
            "statusCode": 400,
            "error": "Bad Request",
            "message": (
                '"headers.content-type" with value "text/plain" fails to match '
                'the required pattern: ^application/json\\b'
            ),
        }

    def test_other_errors_use_pydantic_message(self, dispatch):
        app = with_rest({"GET": with_validation({"query": Pagination})(lambda req, res: None)})

        response = dispatch(app, ApiRequest("GET", query={"page": "0"}))

        assert json.loads(response.body)["message"] == (
            '"query.page" input should be greater than or equal to 1'
        )

    def test_original_error_is_attached(self, dispatch):
        send_error = Mock()
        app = with_rest(
            {"POST": with_validation({"body": FooIsBar})(lambda req, res: None)},
            {"send_error": send_error},
        )

        dispatch(app, ApiRequest("POST", body={}))

        _, error = send_error.call_args.args
        assert error.status_code == 400
        assert isinstance(error.original_error, ValidationError)

    def test_handler_is_not_called_on_failure(self, dispatch):
        handler = Mock(return_value=None)
        app = with_rest({"POST": with_validation({"body": FooIsBar})(handler)})

        dispatch(app, ApiRequest("POST", body={"foo": "nope"}))

        handler.assert_not_called()


class TestNormalization:
    """Test cases for valid requests."""

    def test_copies_normalized_values(self, dispatch):
        schemas = {"query": TrimmedFoo, "body": TrimmedFoo, "headers": TrimmedHeaders}

        def handler(req, res):
            return {"query": req.query, "body": req.body, "headers": req.headers}

        app = with_rest({"POST": with_validation(schemas)(handler)})

        response = dispatch(app, ApiRequest(
            "POST",
            query={"foo": "first "},
            body={"foo": "second "},
            headers={"X-Foo": "third ", "Accept": "application/json"},
        ))

        body = json.loads(response.body)
        assert body["query"] == {"foo": "first"}
        assert body["body"] == {"foo": "second"}
        assert body["headers"]["x-foo"] == "third"
        assert body["headers"]["accept"] == "application/json"

    def test_coerces_values(self, dispatch):
        app = with_rest({"GET": with_validation({"query": Pagination})(lambda req, res: req.query)})

        response = dispatch(app, ApiRequest("GET", query={"page": "3"}))

        assert json.loads(response.body) == {"page": 3}

    def test_applies_defaults(self, dispatch):
        app = with_rest({"GET": with_validation({"query": Pagination})(lambda req, res: req.query)})

        response = dispatch(app, ApiRequest("GET"))

        assert json.loads(response.body) == {"page": 1}

    def test_segments_without_schema_are_untouched(self, dispatch):
        app = with_rest({"POST": with_validation({"query": Pagination})(lambda req, res: req.body)})

        response = dispatch(app, ApiRequest("POST", body={"anything": ["goes"]}))

        assert json.loads(response.body) == {"anything": ["goes"]}

    def test_absent_body_is_validated_as_empty_object(self, dispatch):
        handler = Mock()
        app = with_rest({"POST": with_validation({"body": FooIsBar})(handler)})

        response = dispatch(app, ApiRequest("POST"))

        assert response.status_code == 400
        assert json.loads(response.body)["message"] == '"body.foo" is required'
        handler.assert_not_called()

    def test_empty_text_body_is_validated_as_empty_object(self, dispatch):
        app = with_rest({"POST": with_validation({"body": FooIsBar})(lambda req, res: req.body)})

        response = dispatch(app, ApiRequest("POST", body=""))

        assert response.status_code == 400
        assert json.loads(response.body)["message"] == '"body.foo" is required'

    def test_absent_body_passes_schema_with_optional_fields(self, dispatch):
        app = with_rest({"POST": with_validation({"body": TrimmedFoo})(lambda req, res: {"body": req.body})})

        response = dispatch(app, ApiRequest("POST"))

        assert response.status_code == 200
        assert json.loads(response.body) == {"body": {"foo": None}}

    def test_absent_body_without_body_schema_stays_absent(self, dispatch):
        app = with_rest({"POST": with_validation({"query": Pagination})(lambda req, res: {"body": req.body})})

        response = dispatch(app, ApiRequest("POST"))

        assert json.loads(response.body) == {"body": None}

    def test_async_handler_result_is_propagated(self, dispatch):
        async def handler(req, res):
            return {"foo": req.body["foo"]}

        app = with_rest({"POST": with_validation({"body": FooIsBar})(handler)})

        response = dispatch(app, ApiRequest("POST", body={"foo": "bar"}))

        assert json.loads(response.body) == {"foo": "bar"}

    def test_handler_errors_are_propagated(self, dispatch):
        def handler(req, res):
            raise HttpError("taken", status_code=409)

        app = with_rest({"POST": with_validation({"body": FooIsBar})(handler)})

        response = dispatch(app, ApiRequest("POST", body={"foo": "bar"}))

        assert response.status_code == 409
        assert json.loads(response.body)["message"] == "taken"

    def test_keeps_handler_name(self):
        def create_thing(req, res):
            return None

        assert with_validation({"body": FooIsBar})(create_thing).__name__ == "create_thing"


class TestBuildRequestSchema:
    """Test cases for the composite schema."""

    def test_rejects_unknown_segments(self):
        with pytest.raises(ValueError, match="cookies"):
            build_request_schema({"cookies": FooIsBar})

    def test_allows_other_request_properties(self):
        schema = build_request_schema({"body": FooIsBar})

        validated = schema.model_validate({"body": {"foo": "bar"}, "path": "/x"})

        assert validated.model_dump()["path"] == "/x"

    def test_segments_with_schema_are_required(self):
        schema = build_request_schema({"body": FooIsBar})

        with pytest.raises(ValidationError) as exc_info:
            schema.model_validate({"query": {}})

        assert format_validation_error(exc_info.value) == '"body" is required'
