import pytest

from algoflow.conditions import (
    ComparisonNode,
    ComparisonOperator,
    EvaluatorError,
    IdentifierNode,
    LexerError,
    LogicalNode,
    LogicalOperator,
    NodeKind,
    NumberNode,
    ParserError,
    Parser,
    TokenType,
    evaluate,
    evaluate_condition,
    parse,
    to_expression,
    tokenize,
)
from algoflow.indicators.types import MACDValue


def test_tokenize_mixed_expression():
    tokens = tokenize("RSI_14 <= 30 AND MACD.line > -1.5")

    assert [t.type for t in tokens] == [
        TokenType.IDENTIFIER,
        TokenType.OPERATOR,
        TokenType.NUMBER,
        TokenType.LOGICAL,
        TokenType.IDENTIFIER,
        TokenType.OPERATOR,
        TokenType.NUMBER,
        TokenType.EOF,
    ]
    assert tokens[4].value == "MACD.line"
    assert tokens[6].value == "-1.5"
    assert tokens[3].position == 13


def test_tokenize_lowercase_and_is_an_identifier():
    tokens = tokenize("a and b")

    assert tokens[1].type is TokenType.IDENTIFIER


def test_tokenize_rejects_unknown_character():
    with pytest.raises(LexerError) as exc_info:
        tokenize("close > 10 & open < 5")

    assert exc_info.value.position == 11
    assert "Unexpected character: &" in exc_info.value.message


@pytest.mark.parametrize("expression", ["\u0663 > 2", "close > \u0661\u0660", "x > -\u0663"])
def test_tokenize_rejects_non_ascii_digits(expression):
    with pytest.raises(LexerError, match="Unexpected character"):
        tokenize(expression)


def test_trailing_minus_is_not_a_number():
    with pytest.raises(LexerError, match="Unexpected character: -"):
        tokenize("close > -")


def test_parse_and_binds_tighter_than_or():
    tree = parse("a > 1 OR b > 2 AND c > 3")

    assert isinstance(tree, LogicalNode)
    assert tree.operator is LogicalOperator.OR
    assert tree.right.kind is NodeKind.LOGICAL
    assert tree.right.operator is LogicalOperator.AND


def test_parse_parentheses_override_precedence():
    tree = parse("(a > 1 OR b > 2) AND c > 3")

    assert tree.operator is LogicalOperator.AND
    assert tree.left.operator is LogicalOperator.OR


def test_parse_builds_comparison_leaves():
    tree = parse("close >= 101.5")

    assert tree == ComparisonNode(
        ComparisonOperator.GTE,
        IdentifierNode("close"),
        NumberNode(101.5),
    )


@pytest.mark.parametrize(
    "expression, message",
    [
        ("", "Unexpected end of expression"),
        ("close >", "Unexpected end of expression"),
        ("(close > 1", "Expected closing parenthesis"),
        ("close > 1 2", "Unexpected token: 2"),
        ("> 1", "Unexpected token: >"),
    ],
)
def test_parse_errors(expression, message):
    with pytest.raises(ParserError, match=message):
        parse(expression)


def test_deep_nesting_is_rejected_with_position():
    expression = "(" * 3000 + "1" + ")" * 3000

    with pytest.raises(ParserError, match="Expression nested too deeply") as exc_info:
        evaluate(expression, {})

    assert exc_info.value.position == 100


def test_nesting_within_limit_parses():
    assert evaluate("(" * 50 + "close > 1" + ")" * 50, {"close": 2}) is True


def test_parser_appends_missing_eof():
    tokens = [t for t in tokenize("x > 1") if t.type is not TokenType.EOF]

    tree = Parser(tokens).parse()

    assert tree.kind is NodeKind.COMPARISON


def test_to_expression_reparses_to_same_tree():
    tree = parse("(RSI_14 < 30 OR RSI_14 > 70) AND close > SMA_20")

    assert parse(to_expression(tree)) == tree


def test_evaluate_simple_comparisons():
    indicators = {"RSI_14": 25.0, "SMA_20": 100.0, "close": 105.0}

    assert evaluate("RSI_14 < 30 AND close > SMA_20", indicators) is True
    assert evaluate("RSI_14 > 30 OR close < SMA_20", indicators) is False
    assert evaluate("close != 105", indicators) is False


def test_evaluate_identifier_lookup_ignores_case():
    assert evaluate("rsi_14 < 30", {"RSI_14": 10}) is True


def test_evaluate_macd_members():
    indicators = {"MACD": MACDValue(line=1.2, signal=0.8, histogram=0.4)}

    assert evaluate("MACD.line > MACD.signal", indicators) is True
    assert evaluate("MACD.histogram < 0", indicators) is False


def test_evaluate_accepts_plain_mapping_members():
    assert evaluate("MACD.line > 0", {"MACD": {"line": 1.0, "signal": None}}) is True


def test_evaluate_unknown_indicator():
    with pytest.raises(EvaluatorError, match="Unknown indicator: EMA_9"):
        evaluate("EMA_9 > 1", {"SMA_20": 1.0})


def test_evaluate_object_without_member():
    with pytest.raises(EvaluatorError, match="use dot notation"):
        evaluate("MACD > 0", {"MACD": MACDValue(line=1.0, signal=1.0, histogram=0.0)})


def test_evaluate_member_on_number():
    with pytest.raises(EvaluatorError, match="is a number, not an object"):
        evaluate("SMA_20.line > 0", {"SMA_20": 10.0})


def test_evaluate_unknown_member():
    with pytest.raises(EvaluatorError, match="Unknown property: foo on MACD"):
        evaluate("MACD.foo > 0", {"MACD": MACDValue(line=1.0, signal=1.0, histogram=0.0)})


def test_evaluate_value_not_computed_yet():
    with pytest.raises(EvaluatorError, match="no value yet"):
        evaluate("SMA_20 > 0", {"SMA_20": None})

    with pytest.raises(EvaluatorError, match="no value yet"):
        evaluate("MACD.signal > 0", {"MACD": MACDValue(line=1.0, signal=None, histogram=None)})


def test_evaluate_condition_wraps_result():
    result = evaluate_condition({"close": 10}, "close > 5")

    assert result.condition_met is True
    assert result.to_dict() == {"conditionMet": True, "expression": "close > 5"}
