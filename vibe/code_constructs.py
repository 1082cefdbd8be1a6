"""Syntax construct extraction via tree-sitter.

Parses JavaScript-family and Python sources and pulls out functions,
classes and variable declarations with their byte offsets and line ranges.
Files in any other language produce no constructs; callers fall back to
line-window chunking for them.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import tree_sitter
import tree_sitter_javascript
import tree_sitter_python

from .errors import ConstructExtractionError
from .models import Construct, ConstructKind, Language

logger = logging.getLogger(__name__)

# tree-sitter node types per construct bucket (JS and Python grammars share the table)
NODE_TYPES: Dict[ConstructKind, frozenset] = {
    ConstructKind.FUNCTION: frozenset({
        "function_declaration",
        "arrow_function",
        "function_definition",
        "method_definition",
    }),
    ConstructKind.CLASS: frozenset({
        "class_declaration",
        "class_definition",
    }),
    ConstructKind.VARIABLE: frozenset({
        "variable_declarator",
        "lexical_declaration",
    }),
}

ANONYMOUS = "anonymous"

_GRAMMARS = {
    Language.JAVASCRIPT: tree_sitter_javascript.language,
    Language.PYTHON: tree_sitter_python.language,
}


def _node_text(node: Any) -> str:
    return node.text.decode("utf8")


def resolve_name(node: Any) -> str:
    """Resolve a construct name.

    Order: the node's "name" field, then the first variable_declarator's
    "name" field, then the first identifier child, then "anonymous".
    """
    name_node = node.child_by_field_name("name")
    if name_node is not None:
        return _node_text(name_node)

    for child in node.children:
        if child.type == "variable_declarator":
            declarator_name = child.child_by_field_name("name")
            if declarator_name is not None:
                return _node_text(declarator_name)
            break

    for child in node.children:
        if child.type == "identifier":
            return _node_text(child)

    return ANONYMOUS


def _kind_for_node_type(node_type: str) -> Optional[ConstructKind]:
    for kind, types in NODE_TYPES.items():
        if node_type in types:
            return kind
    return None


class ConstructExtractor:
    """Extracts Constructs from source text.

    Parsers are created lazily, one per grammar, and reused across files.
    """

    def __init__(self):
        self._parsers: Dict[Language, Any] = {}

    def supports(self, language: Language) -> bool:
        return language in _GRAMMARS

    def _get_parser(self, language: Language) -> Any:
        parser = self._parsers.get(language)
        if parser is None:
            grammar = tree_sitter.Language(_GRAMMARS[language]())
            parser = tree_sitter.Parser(grammar)
            self._parsers[language] = parser
        return parser

    def extract(
        self,
        source: str,
        language: Language,
        kind_filter: Optional[ConstructKind] = None,
    ) -> List[Construct]:
        """Extract constructs from source text.

        Args:
            source: File contents
            language: Grammar family resolved from the file extension
            kind_filter: Only emit this bucket (default: all three)

        Returns:
            Constructs in pre-order traversal order. Empty for unsupported languages.

        Raises:
            ConstructExtractionError: If the parser fails on the input.
        """
        if not self.supports(language):
            return []

        if kind_filter is not None:
            targets = {kind_filter: NODE_TYPES[kind_filter]}
        else:
            targets = NODE_TYPES
        wanted = frozenset().union(*targets.values())

        try:
            tree = self._get_parser(language).parse(source.encode("utf8"))
        except Exception as e:
            raise ConstructExtractionError(f"{language.value} parse failed: {e}") from e

        constructs: List[Construct] = []
        # Iterative pre-order walk over named children
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.type in wanted:
                kind = _kind_for_node_type(node.type)
                constructs.append(Construct(
                    kind=kind,
                    name=resolve_name(node),
                    start_offset=node.start_byte,
                    end_offset=node.end_byte,
                    start_line=node.start_point[0] + 1,  # tree-sitter rows are 0-indexed
                    end_line=node.end_point[0] + 1,
                ))
            stack.extend(reversed(node.named_children))

        logger.debug(
            f"Extracted {len(constructs)} {kind_filter.value if kind_filter else 'all'} "
            f"constructs ({language.value})"
        )
        return constructs


_default_extractor: Optional[ConstructExtractor] = None


def extract_constructs(
    source: str,
    language: Language,
    kind_filter: Optional[ConstructKind] = None,
) -> List[Construct]:
    """Extract constructs using a shared ConstructExtractor instance."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = ConstructExtractor()
    return _default_extractor.extract(source, language, kind_filter)
