"""
Schema validation and linting for expression documents.
"""

import json
import os
from typing import Any, Dict, Iterable, List, Optional

from jsonschema import Draft7Validator

from .errors import ArgumentError, DocumentError, ParseError
from .functions import BUILTINS
from .nodes import CallNode, IdentifierNode
from .parser import parse

DEFAULT_SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "expr_schema.json")


class DocumentValidator:
    """Validates expression documents against the bundled JSON schema."""

    def __init__(self, schema_path: str = None):
        self.schema_path = schema_path or DEFAULT_SCHEMA_PATH
        self.schema = self._load_schema()
        self.validator = Draft7Validator(self.schema)

    def _load_schema(self) -> Dict[str, Any]:
        try:
            with open(self.schema_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            raise DocumentError(f"Schema file not found: {self.schema_path}")
        except json.JSONDecodeError as e:
            raise DocumentError(f"Invalid JSON in schema file: {e}")

    def validate_document(self, document: Any) -> List[str]:
        """
        Validate a document against the schema.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        for error in sorted(self.validator.iter_errors(document), key=lambda e: [str(p) for p in e.path]):
            path = '.'.join(str(p) for p in error.path) if error.path else 'root'
            errors.append(f"{path}: {error.message}")
        return errors

    def lint_exprs(self, document: Any, known_functions: Optional[Iterable[str]] = None) -> List[str]:
        """
        Lint every expression in a document.

        Args:
            document: Parsed document with 'expressions' and optional 'values'
            known_functions: Names of user functions the host will bind

        Returns:
            List of warning messages, each prefixed with its category
        """
        warnings = [f"SCHEMA_ERROR: {message}" for message in self.validate_document(document)]
        if not isinstance(document, dict) or not isinstance(document.get("expressions"), dict):
            return warnings

        values = document.get("values")
        if not isinstance(values, dict):
            values = {}
        known = set(known_functions or [])

        for name, source in document["expressions"].items():
            if not isinstance(source, str):
                continue
            try:
                tree = parse(source)
            except ParseError as e:
                warnings.append(f"PARSE_ERROR: Expression '{name}': {e}")
                continue
            warnings.extend(self._check_tree(name, tree, values, known))

        return warnings

    def _check_tree(self, name: str, tree, values: Dict[str, Any], known: set) -> List[str]:
        warnings = []
        for node in tree.walk():
            if isinstance(node, IdentifierNode) and node.name not in values:
                warnings.append(
                    f"UNDEFINED_VARIABLE: Expression '{name}' references unbound variable '{node.name}'"
                )
            elif isinstance(node, CallNode):
                builtin = BUILTINS.get(node.name)
                if builtin is None:
                    if node.name not in known:
                        warnings.append(
                            f"UNKNOWN_FUNCTION: Expression '{name}' calls unknown function '{node.name}'"
                        )
                    continue
                try:
                    builtin.check_arity(node.name, len(node.args))
                except ArgumentError as e:
                    warnings.append(f"BUILTIN_ARITY: Expression '{name}': {e}")
        return warnings


def validate_document(document: Any, schema_path: str = None) -> List[str]:
    """Validate an expression document against the schema."""
    return DocumentValidator(schema_path).validate_document(document)


def lint_exprs(document: Any, known_functions: Optional[Iterable[str]] = None) -> List[str]:
    """Lint an expression document for likely mistakes."""
    return DocumentValidator().lint_exprs(document, known_functions)
