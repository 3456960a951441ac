import functools
import logging

import pyparsing as _pp

logger = logging.getLogger(__name__)

COMPILE_CACHE_SIZE = 256

FUNCTIONS = 'anyOf', 'allOf', 'not', 'valuesFor'

VALUES_METHODS = {
    'isPresent': 'is_present',
    'isAnyOf': 'is_any_of',
    'isAllOf': 'is_all_of',
    'isOnly': 'is_only',
    'isEach': 'is_each',
}


class TagExpressionError(RuntimeError):
    pass


def _node(t):
    # operand groups may come wrapped in single element lists depending on the pyparsing version
    while not isinstance(t, tuple):
        assert not isinstance(t, str), "unexpected token: " + t
        t, = t
    return t


def _operator_tokens(t):
    if len(t) == 1 and not isinstance(t[0], (str, tuple)):
        return list(t[0])
    return list(t)


def _make_unary(s, l, t):
    tokens = _operator_tokens(t)
    node = _node(tokens[-1])
    for op in reversed(tokens[:-1]):
        node = (op, node)
    return [node]


def _make_infix(s, l, t):
    tokens = _operator_tokens(t)
    op = tokens[1]
    operands = [_node(i) for i in tokens[0::2]]
    node = operands[-1]
    for operand in reversed(operands[:-1]):
        node = (op, operand, node)
    return [node]


def _make_call(s, l, t):
    function = t.function
    args = tuple(t.args)

    if function not in FUNCTIONS:
        raise _pp.ParseFatalException(s, l, "unknown function '{}'".format(function))

    if function == 'valuesFor' and len(args) != 1:
        raise _pp.ParseFatalException(s, l, "'valuesFor' takes exactly one argument")

    method = t.method or None
    method_args = tuple(t.method_args) if 'method_args' in t else None

    if method is not None:
        if function != 'valuesFor':
            raise _pp.ParseFatalException(
                s, l, "method '{}' can only be called on the result of 'valuesFor'".format(method))

        if method not in VALUES_METHODS:
            raise _pp.ParseFatalException(s, l, "unknown method '{}'".format(method))

        if method == 'isPresent':
            if method_args:
                raise _pp.ParseFatalException(s, l, "'isPresent' takes no arguments")
            method_args = ()
        elif method_args is None:
            raise _pp.ParseFatalException(s, l, "'{}' must be called".format(method))

    return [('call', function, args, method, method_args)]


_LPAR, _RPAR, _DOT, _COMMA = map(_pp.Suppress, "().,")

_string = _pp.QuotedString("'") | _pp.QuotedString('"')
_ident = _pp.Word(_pp.alphas + "_$", _pp.alphanums + "_$")
_args = _LPAR + _pp.Optional(_string + _pp.ZeroOrMore(_COMMA + _string)) + _RPAR

_call = (
    _ident("function")
    + _pp.Group(_args)("args")
    + _pp.Optional(
        _DOT
        + _ident("method")
        + _pp.Optional(_pp.Group(_args)("method_args"))
    )
).set_parse_action(_make_call)

_expr = _pp.infix_notation(
    _call,
    [
        ("!", 1, _pp.OpAssoc.RIGHT, _make_unary),
        ("&&", 2, _pp.OpAssoc.RIGHT, _make_infix),
        ("||", 2, _pp.OpAssoc.RIGHT, _make_infix),
    ]
)


class Environment:
    """
    Binds the selector functions to a single tag set.
    """

    def __init__(self, tag_set):
        self.tag_set = tag_set
        self.functions = {
            'anyOf': lambda *args: tag_set.any_of(args),
            'allOf': lambda *args: tag_set.all_of(args),
            'not': lambda *args: tag_set.not_(args),
            'valuesFor': lambda name: tag_set.values_for(name),
        }

    def call(self, function, args, method=None, method_args=None):
        result = self.functions[function](*args)

        if method is not None:
            result = getattr(result, VALUES_METHODS[method])(*method_args)

        return result


def compile(expr):
    """
    Parses a selector such as ``anyOf('@smoke') && !valuesFor('@env').isAnyOf('prod')``
    and returns a function evaluating it against an :class:`Environment`.
    """
    if not isinstance(expr, str):
        raise TagExpressionError("tag expression must be a string, got {!r}".format(expr))

    return _compile(expr)


@functools.lru_cache(maxsize=COMPILE_CACHE_SIZE)
def _compile(expr):
    try:
        ast = _node(_expr.parse_string(expr, parse_all=True))
    except _pp.ParseBaseException as e:
        raise TagExpressionError(
            "Error parsing tag expression at \"@@@\": {} ({})".format(e.mark_input_line("@@@"), e.msg)
        ) from e

    logger.debug("compiled tag expression %r: %r", expr, ast)

    def evaluate(env):
        def recurse(ast):
            if ast[0] == 'call':
                return env.call(*ast[1:])
            if ast[0] == '!':
                return not recurse(ast[1])
            if ast[0] == '&&':
                return recurse(ast[1]) and recurse(ast[2])
            if ast[0] == '||':
                return recurse(ast[1]) or recurse(ast[2])

            assert 0

        return recurse(ast)

    return evaluate
