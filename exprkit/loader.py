"""
Loading and dumping named expressions as YAML documents.

A document binds shared variables under 'values' and names each
expression under 'expressions':

    values:
      age: 20
    expressions:
      adult: "age >= 18"
"""

import logging
from typing import Any, Dict, Iterable, Optional

import yaml

from .errors import ConversionError, DocumentError, ParseError
from .expr import Expr
from .parser import DEFAULT_MAX_DEPTH
from .validator import DocumentValidator

logger = logging.getLogger(__name__)


def load_document_from_yaml(yaml_content: str) -> Dict[str, Any]:
    """Parse YAML text into a document dictionary without validating it."""
    try:
        document = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise DocumentError(f"Invalid YAML: {e}")
    if not isinstance(document, dict):
        raise DocumentError("Expression document must be a mapping")
    return document


def build_exprs(document: Dict[str, Any], max_depth: int = DEFAULT_MAX_DEPTH,
                known_functions: Optional[Iterable[str]] = None) -> Dict[str, Expr]:
    """
    Compile every expression in a validated document.

    Each returned Expr carries all of the document's 'values' bindings.
    Lint findings that do not stop compilation are logged as warnings.

    Raises:
        DocumentError: If the document violates the schema, a value cannot
            be converted, or an expression fails to parse.
    """
    validator = DocumentValidator()
    errors = validator.validate_document(document)
    if errors:
        raise DocumentError("Invalid expression document: " + "; ".join(errors))

    values = document.get("values") or {}
    exprs = {}
    for name, source in document["expressions"].items():
        expr = Expr(source, max_depth)
        try:
            for var_name, value in values.items():
                expr.value(var_name, value)
            exprs[name] = expr.compile()
        except ConversionError as e:
            raise DocumentError(f"Expression '{name}': {e}") from e
        except ParseError as e:
            raise DocumentError(f"Expression '{name}': {e}", e.position) from e

    for warning in validator.lint_exprs(document, known_functions):
        logger.warning(warning)

    logger.debug("Loaded %d expression(s)", len(exprs))
    return exprs


def load_exprs_from_yaml(yaml_content: str, max_depth: int = DEFAULT_MAX_DEPTH,
                         known_functions: Optional[Iterable[str]] = None) -> Dict[str, Expr]:
    """Load named expressions from a YAML string."""
    return build_exprs(load_document_from_yaml(yaml_content), max_depth, known_functions)


def load_exprs_from_file(file_path: str, max_depth: int = DEFAULT_MAX_DEPTH,
                         known_functions: Optional[Iterable[str]] = None) -> Dict[str, Expr]:
    """Load named expressions from a YAML file."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        raise DocumentError(f"Error reading file {file_path}: {e}")
    return load_exprs_from_yaml(content, max_depth, known_functions)


def dump_exprs_to_yaml(exprs: Dict[str, Expr], values: Optional[Dict[str, Any]] = None) -> str:
    """Serialize expressions by their source text, optionally with shared values."""
    document: Dict[str, Any] = {}
    if values:
        document["values"] = values
    document["expressions"] = {name: expr.expression for name, expr in exprs.items()}
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
