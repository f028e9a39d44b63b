"""Application layer - Dependency name extraction from factory declarations."""

import inspect
import re
import types
import typing
from typing import Any, Callable, List, NamedTuple

from namewire.domain import Dependency, ParseError

INJECT_ATTRIBUTE = "__inject__"

_TOKEN_TEMPLATE = r"""
      (?P<block_comment>/\*.*?\*/)
    | (?P<line_comment>{line_comment}[^\n]*)
    | (?P<string>"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*'|`(?:\\.|[^`\\])*`)
    | (?P<arrow>=>)
    | (?P<double_star>\*\*)
    | (?P<name>(?:[^\W\d]|\$)[\w$]*)
    | (?P<space>\s+)
    | (?P<symbol>.)
    """

_BRACE_TOKENS = re.compile(_TOKEN_TEMPLATE.replace("{line_comment}", "//"), re.VERBOSE | re.DOTALL)
_PYTHON_TOKENS = re.compile(_TOKEN_TEMPLATE.replace("{line_comment}", r"\#"), re.VERBOSE | re.DOTALL)

# Leading comments and decorators, then def, async def, lambda or a Python class header.
_PYTHON_DECLARATION = re.compile(
    r"(?:\s|\#[^\n]*|@[^\n]*)*(?:(?:async\s+)?def\b|lambda\b|class\s+\w+\s*[(:])"
)

_OPENERS = "([{"
_CLOSERS = ")]}"

_OPTIONAL_ANNOTATION = re.compile(r"\bOptional\b|\|\s*None\b|\bNone\s*\|")


class _Token(NamedTuple):
    kind: str
    text: str
    # Set when a block comment immediately precedes this name.
    annotated: bool = False

    def is_name(self, text: str) -> bool:
        return self.kind == "name" and self.text == text


def _tokenize(text: str) -> List[_Token]:
    pattern = _PYTHON_TOKENS if _PYTHON_DECLARATION.match(text) else _BRACE_TOKENS
    tokens: List[_Token] = []
    annotated = False
    for match in pattern.finditer(text):
        kind = match.lastgroup
        if kind == "block_comment":
            annotated = True
            continue
        if kind in ("line_comment", "space"):
            continue
        tokens.append(_Token(kind, match.group(), annotated and kind == "name"))
        annotated = False
    return tokens


def _closing_index(tokens: List[_Token], open_index: int, text: str) -> int:
    """Return the index of the delimiter closing the one at ``open_index``."""
    depth = 0
    for index in range(open_index, len(tokens)):
        token = tokens[index]
        if token.kind != "symbol":
            continue
        if token.text in _OPENERS:
            depth += 1
        elif token.text in _CLOSERS:
            depth -= 1
            if depth == 0:
                return index
    raise ParseError(text, "unbalanced parameter list")


def _parenthesized(tokens: List[_Token], open_index: int, text: str) -> List[_Token]:
    return tokens[open_index + 1 : _closing_index(tokens, open_index, text)]


def _lambda_parameters(tokens: List[_Token], start: int, text: str) -> List[_Token]:
    """Collect lambda parameters up to the colon that starts its body."""
    depth = 0
    nested_lambdas = 0
    for index in range(start, len(tokens)):
        token = tokens[index]
        if token.is_name("lambda"):
            nested_lambdas += 1
        elif token.kind == "symbol" and token.text in _OPENERS:
            depth += 1
        elif token.kind == "symbol" and token.text in _CLOSERS:
            depth -= 1
        elif token.text == ":" and depth == 0:
            if not nested_lambdas:
                return tokens[start:index]
            nested_lambdas -= 1
    raise ParseError(text, "lambda without a body")


def _split_parameters(tokens: List[_Token]) -> List[List[_Token]]:
    parameters: List[List[_Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.kind == "symbol" and token.text in _OPENERS:
            depth += 1
        elif token.kind == "symbol" and token.text in _CLOSERS:
            depth -= 1
        elif token.text == "," and depth == 0:
            parameters.append([])
            continue
        parameters[-1].append(token)
    return [parameter for parameter in parameters if parameter]


def _is_optional(rest: List[_Token]) -> bool:
    if not rest:
        return False
    if rest[0].text == "?":
        return True
    if rest[0].text != ":":
        return False
    annotation = []
    depth = 0
    for token in rest[1:]:
        if token.kind == "symbol" and token.text in _OPENERS:
            depth += 1
        elif token.kind == "symbol" and token.text in _CLOSERS:
            depth -= 1
        elif token.text == "=" and depth == 0:
            break
        annotation.append(token.text)
    return bool(_OPTIONAL_ANNOTATION.search(" ".join(annotation)))


def _to_dependencies(parameters: List[List[_Token]], text: str) -> List[Dependency]:
    dependencies: List[Dependency] = []
    keyword_only = False
    for parameter in parameters:
        first, rest = parameter[0], parameter[1:]
        if first.text == "/" and not rest:
            continue
        if first.text == "*":
            # Bare "*" or "*args": everything after is keyword-only.
            keyword_only = True
            continue
        if first.kind == "double_star":
            continue
        if first.kind != "name" or (rest and rest[0].text not in ("?", ":", "=")):
            raise ParseError(
                text,
                f"parameter '{' '.join(token.text for token in parameter)}' is not a bare identifier",
            )
        dependencies.append(
            Dependency(
                name=first.text,
                optional=first.annotated or _is_optional(rest),
                keyword=keyword_only,
            )
        )
    return dependencies


def _skip_preamble(tokens: List[_Token], text: str) -> int:
    """Skip decorators and ``async`` in front of a declaration."""
    position = 0
    while position < len(tokens):
        token = tokens[position]
        if token.text == "@":
            position += 1
            if position < len(tokens) and tokens[position].kind == "name":
                position += 1
            while (
                position + 1 < len(tokens)
                and tokens[position].text == "."
                and tokens[position + 1].kind == "name"
            ):
                position += 2
            if position < len(tokens) and tokens[position].text == "(":
                position = _closing_index(tokens, position, text) + 1
        elif token.is_name("async"):
            position += 1
        else:
            break
    return position


def _class_parameters(tokens: List[_Token], start: int, text: str) -> List[List[_Token]]:
    for index in range(start, len(tokens) - 2):
        if tokens[index].is_name("def") and tokens[index + 1].is_name("__init__") and tokens[index + 2].text == "(":
            # Python constructors receive the instance first.
            return _split_parameters(_parenthesized(tokens, index + 2, text))[1:]
    for index in range(start, len(tokens) - 1):
        if tokens[index].is_name("constructor") and tokens[index + 1].text == "(" and tokens[index - 1].text != ".":
            return _split_parameters(_parenthesized(tokens, index + 1, text))
    return []


def _locate_parameters(tokens: List[_Token], text: str) -> List[List[_Token]]:
    """Find the parameter list of a class, function, lambda or arrow declaration."""
    position = _skip_preamble(tokens, text)
    if position >= len(tokens):
        raise ParseError(text, "empty declaration")

    head = tokens[position]
    following = tokens[position + 1] if position + 1 < len(tokens) else None

    if head.is_name("class"):
        return _class_parameters(tokens, position + 1, text)

    if head.is_name("def") or head.is_name("function"):
        position += 1
        if position < len(tokens) and tokens[position].text == "*":
            position += 1
        if position < len(tokens) and tokens[position].kind == "name":
            position += 1
        if position >= len(tokens) or tokens[position].text != "(":
            raise ParseError(text, "function declaration without a parameter list")
        return _split_parameters(_parenthesized(tokens, position, text))

    if head.is_name("lambda"):
        return _split_parameters(_lambda_parameters(tokens, position + 1, text))

    if head.text == "(":
        # The first balanced list wins, so arrows in the body never end it.
        return _split_parameters(_parenthesized(tokens, position, text))

    if head.kind == "name" and following is not None:
        if following.kind == "arrow":
            return [[head]]
        if following.text == "(":
            return _split_parameters(_parenthesized(tokens, position + 1, text))

    raise ParseError(text, "no parameter list found")


def extract_dependency_names(factory_text: str) -> List[Dependency]:
    """Extract the ordered dependencies declared by a factory's source text.

    Understands Python ``def``/``lambda``/``class`` declarations as well as
    brace-language functions, arrows and classes. The text is never evaluated.

    Args:
        factory_text: Printable declaration of a factory.

    Returns:
        Dependencies in declaration order. A parameter preceded by a block
        comment, suffixed with ``?`` or annotated ``Optional[...]`` is optional.

    Raises:
        ParseError: If no parameter list can be located or a parameter is not a bare identifier.

    Example:
        >>> [str(d) for d in extract_dependency_names("function (a, /* optional */ b, c) {}")]
        ['a', 'b?', 'c']
        >>> [d.name for d in extract_dependency_names("(foo, bar) => (baz) => {}")]
        ['foo', 'bar']
    """
    tokens = _tokenize(factory_text)
    return _to_dependencies(_locate_parameters(tokens, factory_text), factory_text)

_UNION_ORIGINS = {typing.Union, getattr(types, "UnionType", typing.Union)}


def _is_optional_annotation(annotation: Any) -> bool:
    if annotation is inspect.Parameter.empty:
        return False
    if isinstance(annotation, str):
        return bool(_OPTIONAL_ANNOTATION.search(annotation))
    # Only unions count, so Callable[[int], None] stays required.
    return typing.get_origin(annotation) in _UNION_ORIGINS and type(None) in typing.get_args(annotation)


def signature_dependencies(factory: Callable[..., Any]) -> List[Dependency]:
    """Read the dependencies of a live callable from its signature.

    Classes use their ``__init__`` (or ``__new__`` when only that is defined)
    without the receiver; a class defining neither has no dependencies.
    ``*args`` and ``**kwargs`` are skipped and keyword-only parameters are
    passed by keyword. Default values are ignored.

    Raises:
        ParseError: If the callable's signature cannot be introspected.
    """
    if inspect.isclass(factory):
        if factory.__init__ is not object.__init__:
            target, skip = factory.__init__, 1
        elif factory.__new__ is not object.__new__:
            target, skip = factory.__new__, 1
        else:
            return []
    else:
        target, skip = factory, 0

    try:
        parameters = list(inspect.signature(target).parameters.values())[skip:]
    except (TypeError, ValueError) as e:
        raise ParseError(repr(factory), f"no introspectable signature: {e}") from e

    return [
        Dependency(
            name=parameter.name,
            optional=_is_optional_annotation(parameter.annotation),
            keyword=parameter.kind is inspect.Parameter.KEYWORD_ONLY,
        )
        for parameter in parameters
        if parameter.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]


def dependencies_of(factory: Callable[..., Any]) -> List[Dependency]:
    """Return the dependencies of a factory.

    An ``__inject__`` manifest on the factory takes precedence over its
    signature.

    Example:
        >>> def build(a, b): ...
        >>> build.__inject__ = ["config", "logger?"]
        >>> [str(d) for d in dependencies_of(build)]
        ['config', 'logger?']
    """
    manifest = getattr(factory, INJECT_ATTRIBUTE, None)
    if manifest is not None:
        if isinstance(manifest, str):
            raise ParseError(manifest, f"{INJECT_ATTRIBUTE} must be a sequence of names")
        return [Dependency.parse(entry) for entry in manifest]
    return signature_dependencies(factory)
