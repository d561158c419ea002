from typing import Any, List, Optional

from conftest import result_json

from ucp_mcp.store import DocumentStore
from ucp_mcp.validation import (
    SchemaCompileError,
    ValidationEngine,
    ValidationResult,
    Violation,
    schema_name_for_uri,
)


def _engine(spec_tree, compiler=None):
    spec = spec_tree / "spec"
    return ValidationEngine(DocumentStore(spec / "schemas", spec, spec_tree / "source"), compiler=compiler)


def test_missing_required_fields_report_pointer_paths(spec_tree):
    result = _engine(spec_tree).validate("discovery/profile_schema", {})
    assert result.valid is False
    assert result.errors
    assert any(e.startswith("/") for e in result.errors)
    assert any("'ucp'" in e for e in result.errors)


def test_nested_violation_pointer(spec_tree):
    result = _engine(spec_tree).validate("discovery/profile_schema", {"ucp": {"version": 1, "capabilities": []}})
    assert result.errors == ["/ucp/version 1 is not of type 'string'"]


def test_valid_payload_has_no_errors_field(spec_tree):
    result = _engine(spec_tree).validate("ucp", {})
    assert result.valid is True
    assert result.to_dict() == {"valid": True}


def test_unknown_schema_is_a_normal_failure(spec_tree):
    result = _engine(spec_tree).validate("shopping/nope", {})
    assert result.to_dict() == {"valid": False, "errors": ["Schema 'shopping/nope' not found"]}


def test_collects_all_violations(spec_tree):
    result = _engine(spec_tree).validate("shopping/checkout", {})
    assert len(result.errors) == 2


def test_relative_refs_resolve_through_the_store(spec_tree):
    engine = _engine(spec_tree)
    ok = engine.validate("shopping/checkout", {"currency": "USD", "line_items": [{"id": "a", "quantity": 1}]})
    assert ok.valid is True

    bad = engine.validate("shopping/checkout", {"currency": "USD", "line_items": [{"id": "a", "quantity": 0}]})
    assert bad.valid is False
    assert bad.errors[0].startswith("/line_items/0/quantity ")


def test_formats_are_asserted(spec_tree):
    engine = _engine(spec_tree)
    assert engine.validate("types/event", {"at": "2026-01-11T10:00:00Z", "contact": "a@example.com"}).valid
    result = engine.validate("types/event", {"at": "yesterday", "contact": "nobody"})
    assert result.valid is False
    assert len(result.errors) == 2
    assert result.errors[0].startswith("/at ")


def test_unknown_keywords_are_tolerated(spec_tree):
    path = spec_tree / "spec" / "schemas" / "lenient.json"
    path.write_text('{"type": "object", "x-ucp-owner": "shopping", "required": ["a"]}', encoding="utf-8")
    result = _engine(spec_tree).validate("lenient", {})
    assert result.valid is False
    assert result.errors == ["/ 'a' is a required property"]


def test_invalid_schema_is_reported_not_raised(spec_tree):
    (spec_tree / "spec" / "schemas" / "bad_type.json").write_text('{"type": "banana"}', encoding="utf-8")
    result = _engine(spec_tree).validate("bad_type", {})
    assert result.valid is False
    assert result.errors[0].startswith("Validation error: ")


def test_dangling_ref_is_reported_not_raised(spec_tree):
    (spec_tree / "spec" / "schemas" / "dangling.json").write_text(
        '{"properties": {"a": {"$ref": "missing/thing.json"}}}', encoding="utf-8"
    )
    result = _engine(spec_tree).validate("dangling", {"a": 1})
    assert result.valid is False
    assert result.errors[0].startswith("Validation error: ")


def test_compiler_is_pluggable(spec_tree):
    class Fake:
        def __init__(self) -> None:
            self.seen: List[Any] = []

        def compile(self, document: Any, base_uri: Optional[str] = None):
            self.seen.append(base_uri)
            return lambda payload: [Violation("/x", "nope"), Violation("", "root")]

    fake = Fake()
    result = _engine(spec_tree, compiler=fake).validate("ucp", {})
    assert result.errors == ["/x nope", "/ root"]
    assert fake.seen == ["file:///ucp.json"]


def test_compile_error_from_pluggable_compiler(spec_tree):
    class Broken:
        def compile(self, document, base_uri=None):
            raise SchemaCompileError("boom")

    result = _engine(spec_tree, compiler=Broken()).validate("ucp", {})
    assert result == ValidationResult.failed(["Validation error: boom"])


def test_check_returns_structured_violations(spec_tree):
    violations = _engine(spec_tree).check("discovery/profile_schema", {"ucp": {}})
    assert all(isinstance(v, Violation) for v in violations)
    assert {v.pointer for v in violations} == {"/ucp"}


def test_pointer_escaping():
    assert Violation("/a~1b/c~0d", "m").render() == "/a~1b/c~0d m"


def test_schema_name_for_uri():
    assert schema_name_for_uri("https://ucp.dev/schemas/shopping/types/buyer.json") == "shopping/types/buyer"
    assert schema_name_for_uri("file:///shopping/types/buyer.json") == "shopping/types/buyer"
    assert schema_name_for_uri("ucp.json") == "ucp"


def test_invalid_referenced_schema_is_reported_not_raised(spec_tree):
    schemas = spec_tree / "spec" / "schemas"
    (schemas / "outer.json").write_text('{"properties": {"a": {"$ref": "inner.json"}}}', encoding="utf-8")
    (schemas / "inner.json").write_text('{"type": "banana"}', encoding="utf-8")
    result = _engine(spec_tree).validate("outer", {"a": 1})
    assert result.valid is False
    assert result.errors == ["Validation error: unknown type 'banana'"]


def test_malformed_dialect_is_reported_not_raised(spec_tree):
    (spec_tree / "spec" / "schemas" / "odd_dialect.json").write_text('{"$schema": ["x"]}', encoding="utf-8")
    result = _engine(spec_tree).validate("odd_dialect", {})
    assert result.valid is False
    assert result.errors[0].startswith("Validation error: ")


def test_validate_json_tool_reports_broken_ref_target(server, spec_tree):
    schemas = spec_tree / "spec" / "schemas"
    (schemas / "outer.json").write_text('{"properties": {"a": {"$ref": "inner.json"}}}', encoding="utf-8")
    (schemas / "inner.json").write_text('{"type": "banana"}', encoding="utf-8")
    out = result_json(server.call_tool("validate_json", {"schema_name": "outer", "data": {"a": 1}}))
    assert out["valid"] is False
    assert out["errors"][0].startswith("Validation error: ")
