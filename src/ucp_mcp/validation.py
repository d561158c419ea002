# src/ucp_mcp/validation.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol
from urllib.parse import urlsplit

from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import SchemaError, UnknownType
from pydantic import BaseModel
from referencing import Registry, Resource
from referencing.exceptions import NoSuchResource, Unresolvable
from referencing.jsonschema import DRAFT202012

from .store import DocumentStore

logger = logging.getLogger("ucp_mcp.validation")


class SchemaCompileError(Exception):
    """The schema itself is unusable: invalid, or it references something unresolvable."""


class SchemaNotFound(LookupError):
    pass


@dataclass(frozen=True)
class Violation:
    pointer: str  # JSON pointer of the offending instance location, "" for the root
    message: str

    def render(self) -> str:
        return f"{self.pointer or '/'} {self.message}"


class ValidationResult(BaseModel):
    valid: bool
    errors: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def failed(cls, errors: Iterable[str]) -> "ValidationResult":
        return cls(valid=False, errors=list(errors))


Apply = Callable[[Any], List[Violation]]


class SchemaCompiler(Protocol):
    def compile(self, document: Any, base_uri: Optional[str] = None) -> Apply:
        ...


def _pointer(path: Iterable[Any]) -> str:
    return "".join("/" + str(p).replace("~", "~0").replace("/", "~1") for p in path)


def schema_name_for_uri(uri: str) -> str:
    """
    Map a $ref target URI to a logical schema name:
      https://ucp.dev/schemas/shopping/types/buyer.json -> shopping/types/buyer
      file:///shopping/types/buyer.json                 -> shopping/types/buyer
    """
    path = urlsplit(uri).path.lstrip("/")
    if path.startswith("schemas/"):
        path = path[len("schemas/"):]
    if path.endswith(".json"):
        path = path[: -len(".json")]
    return path


class JsonSchemaCompiler:
    """
    jsonschema-backed compiler.

    - validator class picked from $schema, Draft 2020-12 when absent
    - all violations collected, in the validator's own order
    - unknown keywords ignored, `format` asserted via FORMAT_CHECKER
    - cross-document $refs retrieved through the DocumentStore
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._registry: Registry = Registry(retrieve=self._retrieve)

    def _retrieve(self, uri: str) -> Resource:
        name = schema_name_for_uri(uri)
        doc = self._store.resolve(name) if name else None
        if doc is None:
            raise NoSuchResource(ref=uri)
        return Resource.from_contents(doc, default_specification=DRAFT202012)

    def compile(self, document: Any, base_uri: Optional[str] = None) -> Apply:
        if not isinstance(document, (dict, bool)):
            raise SchemaCompileError(f"schema must be an object or boolean, got {type(document).__name__}")

        try:
            cls = validators.validator_for(document, default=Draft202012Validator)
            cls.check_schema(document)
            if isinstance(document, dict) and base_uri and "$id" not in document:
                # Relative $refs in id-less documents resolve next to the document itself.
                document = {**document, "$id": base_uri}
            validator = cls(document, registry=self._registry, format_checker=cls.FORMAT_CHECKER)
        except SchemaError as e:
            raise SchemaCompileError(e.message) from e
        except Exception as e:  # malformed $schema and the like
            raise SchemaCompileError(str(e)) from e

        def apply(payload: Any) -> List[Violation]:
            # Referenced documents are only reached here, so any schema fault in
            # them surfaces while iterating.
            try:
                return [Violation(_pointer(e.absolute_path), e.message) for e in validator.iter_errors(payload)]
            except Unresolvable as e:
                raise SchemaCompileError(f"can't resolve reference {getattr(e, 'ref', e)}") from e
            except UnknownType as e:
                raise SchemaCompileError(f"unknown type {e.type!r}") from e
            except Exception as e:
                raise SchemaCompileError(str(e) or type(e).__name__) from e

        return apply


class ValidationEngine:
    def __init__(self, store: DocumentStore, compiler: Optional[SchemaCompiler] = None) -> None:
        self._store = store
        self._compiler = compiler or JsonSchemaCompiler(store)

    def check(self, name: str, payload: Any) -> List[Violation]:
        """
        Structured violations for `payload` against schema `name`.

        Raises SchemaNotFound when the schema is unknown, SchemaCompileError when
        it cannot be compiled or applied.
        """
        document = self._store.resolve(name)
        if document is None:
            raise SchemaNotFound(name)
        apply = self._compiler.compile(document, base_uri=f"file:///{name}.json")
        return apply(payload)

    def validate(self, name: str, payload: Any) -> ValidationResult:
        try:
            violations = self.check(name, payload)
        except SchemaNotFound:
            return ValidationResult.failed([f"Schema '{name}' not found"])
        except SchemaCompileError as e:
            logger.info("schema %s failed to compile: %s", name, e)
            return ValidationResult.failed([f"Validation error: {e}"])

        if violations:
            return ValidationResult.failed(v.render() for v in violations)
        return ValidationResult.ok()
