# =============================================================================
# Unit Tests — Operation & Schema Filters
# =============================================================================
#
# Filters are exercised directly on hand-built operation dicts. Routes come
# from a throwaway FastAPI router so the context carries a real APIRoute.
#
# Test groups:
#   1. Response headers (defaults + @response_header)
#   2. Auth responses (401/403)
#   3. XML comments
#   4. Validation rules
# =============================================================================

from fastapi import APIRouter
from fastapi.routing import APIRoute

from apidocs.services.comments import MemberComments
from apidocs.services.filters import (
    OperationFilterContext,
    ResponseHeader,
    SchemaFilterContext,
    auth_responses_filter,
    member_name,
    response_header,
    response_headers_filter,
    validation_rules_schema_filter,
    xml_comments_filter,
)

router = APIRouter()


@router.get("/v1/orders")
@response_header("X-Total-Count", status_code=200, type="integer")
@response_header("X-Page", description="Current page")
async def list_orders():
    return []


@router.get("/v1/orders/{order_id}", summary="Fetch one order")
async def get_order(order_id: int):
    """Return one order."""
    return {}


def _route(path: str) -> APIRoute:
    return next(r for r in router.routes if r.path == path)


def _context(path: str = "/v1/orders", security=None) -> OperationFilterContext:
    return OperationFilterContext(
        route=_route(path),
        method="GET",
        group_name="v1",
        security=security or [],
    )


def _operation(*status_codes: str) -> dict:
    return {
        "responses": {
            code: {"description": f"Response {code}"} for code in status_codes
        },
    }


# ---------------------------------------------------------------------------
# 1. Response Headers
# ---------------------------------------------------------------------------


class TestResponseHeadersFilter:
    """Tests for response_headers_filter()."""

    CORRELATION = ResponseHeader(name="X-Correlation-ID", description="Trace id")

    def test_default_header_added_to_every_response(self):
        operation = _operation("200", "404")
        response_headers_filter([self.CORRELATION])(
            
            operation, _context("/v1/orders/{order_id}"),
        )
        for response in operation["responses"].values():
            assert response["headers"]["X-Correlation-ID"] == {
                "schema": {"type": "string"},
                "description": "Trace id",
            }

    def test_no_new_responses_are_created(self):
        operation = _operation("200")
        response_headers_filter([self.CORRELATION])(operation, _context())
        assert list(operation["responses"]) == ["200"]

    def test_existing_header_is_not_overwritten(self):
        operation = _operation("200")
        original = {"schema": {"type": "string", "format": "uuid"}}
        operation["responses"]["200"]["headers"] = {"X-Correlation-ID": original}

        response_headers_filter([self.CORRELATION])(operation, _context())

        assert operation["responses"]["200"]["headers"]["X-Correlation-ID"] == {
            "schema": {"type": "string", "format": "uuid"},
        }

    def test_existing_headers_are_kept(self):
        operation = _operation("200")
        operation["responses"]["200"]["headers"] = {"ETag": {"schema": {"type": "string"}}}

        response_headers_filter([self.CORRELATION])(
            operation, _context("/v1/orders/{order_id}"),
        )

        assert set(operation["responses"]["200"]["headers"]) == {
            "ETag", "X-Correlation-ID",
        }

    def test_declared_header_limited_to_status_code(self):
        operation = _operation("200", "422")
        response_headers_filter()(operation, _context())

        assert "X-Total-Count" in operation["responses"]["200"]["headers"]
        assert "X-Total-Count" not in operation["responses"]["422"]["headers"]
        assert operation["responses"]["200"]["headers"]["X-Total-Count"] == {
            "schema": {"type": "integer"},
        }

    def test_declared_header_without_status_goes_everywhere(self):
        operation = _operation("200", "422")
        response_headers_filter()(operation, _context())

        for response in operation["responses"].values():
            assert response["headers"]["X-Page"]["description"] == "Current page"

    def test_declared_headers_keep_written_order(self):
        declared = getattr(list_orders, "__response_headers__")
        assert [h.name for h in declared] == ["X-Total-Count", "X-Page"]

    def test_no_headers_is_a_no_op(self):
        operation = _operation("200")
        response_headers_filter()(operation, _context("/v1/orders/{order_id}"))
        assert operation == _operation("200")

    def test_header_format_is_documented(self):
        header = ResponseHeader(name="X-Request-Date", format="date-time")
        assert header.to_openapi() == {
            "schema": {"type": "string", "format": "date-time"},
        }


# ---------------------------------------------------------------------------
# 2. Auth Responses
# ---------------------------------------------------------------------------


class TestAuthResponsesFilter:
    """Tests for auth_responses_filter."""

    SECURED = [{"HTTPBearer": []}]

    def test_unsecured_operation_is_unchanged(self):
        operation = _operation("200")
        auth_responses_filter(operation, _context())
        assert operation == _operation("200")

    def test_secured_operation_gets_401_and_403(self):
        operation = _operation("200")
        auth_responses_filter(operation, _context(security=self.SECURED))

        assert operation["responses"]["401"] == {"description": "Unauthorized"}
        assert operation["responses"]["403"] == {"description": "Forbidden"}
        assert operation["responses"]["200"] == {"description": "Response 200"}

    def test_caller_defined_entries_are_untouched(self):
        operation = _operation("200")
        custom = {"description": "Token expired", "content": {"application/json": {}}}
        operation["responses"]["401"] = custom

        auth_responses_filter(operation, _context(security=self.SECURED))

        assert operation["responses"]["401"] is custom
        assert operation["responses"]["401"]["description"] == "Token expired"
        assert operation["responses"]["403"] == {"description": "Forbidden"}

    def test_operation_without_responses(self):
        operation: dict = {}
        auth_responses_filter(operation, _context(security=self.SECURED))
        assert set(operation["responses"]) == {"401", "403"}

    def test_empty_security_override_is_anonymous(self):
        assert _context(security=[]).requires_authorization is False


# ---------------------------------------------------------------------------
# 3. XML Comments
# ---------------------------------------------------------------------------


class TestXmlCommentsFilter:
    """Tests for xml_comments_filter()."""

    def test_member_name_is_module_and_qualname(self):
        assert member_name(_route("/v1/orders")) == f"{__name__}.list_orders"

    def test_fills_generated_summary_and_missing_description(self):
        comments = {
            member_name(_route("/v1/orders")): MemberComments(
                summary="List orders.",
                remarks="Newest first.",
            ),
        }
        operation = {"summary": "List Orders", "responses": {}}
        xml_comments_filter(comments)(operation, _context())

        assert operation["summary"] == "List orders."
        assert operation["description"] == "Newest first."

    def test_explicit_summary_and_docstring_win(self):
        path = "/v1/orders/{order_id}"
        comments = {
            member_name(_route(path)): MemberComments(
                summary="Other summary",
                remarks="Other description",
            ),
        }
        operation = {
            "summary": "Fetch one order",
            "description": "Return one order.",
            "responses": {},
        }
        xml_comments_filter(comments)(operation, _context(path))

        assert operation["summary"] == "Fetch one order"
        assert operation["description"] == "Return one order."

    def test_parameter_and_response_descriptions(self):
        path = "/v1/orders/{order_id}"
        comments = {
            member_name(_route(path)): MemberComments(
                params={"order_id": "Order identifier."},
                responses={"200": "The order.", "404": "Order not found."},
            ),
        }
        operation = {
            "parameters": [{"name": "order_id", "in": "path"}],
            "responses": {
                "200": {"description": "Successful Response"},
                "422": {"description": "Validation Error"},
            },
        }
        xml_comments_filter(comments)(operation, _context(path))

        assert operation["parameters"][0]["description"] == "Order identifier."
        assert operation["responses"]["200"]["description"] == "The order."
        assert operation["responses"]["404"] == {"description": "Order not found."}
        assert operation["responses"]["422"]["description"] == "Validation Error"

    def test_custom_response_description_is_kept(self):
        comments = {
            member_name(_route("/v1/orders")): MemberComments(
                responses={"200": "From XML"},
            ),
        }
        operation = {"responses": {"200": {"description": "All orders"}}}
        xml_comments_filter(comments)(operation, _context())
        assert operation["responses"]["200"]["description"] == "All orders"

    def test_unknown_member_is_a_no_op(self):
        operation = {"summary": "List Orders", "responses": {}}
        xml_comments_filter({})(operation, _context())
        assert operation == {"summary": "List Orders", "responses": {}}


# ---------------------------------------------------------------------------
# 4. Validation Rules
# ---------------------------------------------------------------------------


class TestValidationRulesSchemaFilter:
    """Tests for validation_rules_schema_filter."""

    CONTEXT = SchemaFilterContext(name="OrderCreate", group_name="v1")

    def test_not_empty_properties_become_required(self):
        schema = {
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "tags": {"type": "array", "minItems": 1},
                "note": {"type": "string"},
            },
        }
        validation_rules_schema_filter(schema, self.CONTEXT)
        assert schema["required"] == ["name", "tags"]

    def test_existing_required_list_is_extended(self):
        schema = {
            "properties": {
                "id": {"type": "integer"},
                "name": {"type": "string", "minLength": 3},
            },
            "required": ["id"],
        }
        validation_rules_schema_filter(schema, self.CONTEXT)
        assert schema["required"] == ["id", "name"]

    def test_no_rules_leaves_schema_alone(self):
        schema = {"properties": {"note": {"type": "string"}}}
        validation_rules_schema_filter(schema, self.CONTEXT)
        assert "required" not in schema

    def test_enum_schema_is_ignored(self):
        schema = {"type": "string", "enum": ["a", "b"]}
        validation_rules_schema_filter(schema, self.CONTEXT)
        assert schema == {"type": "string", "enum": ["a", "b"]}
