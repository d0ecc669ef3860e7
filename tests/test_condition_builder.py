import pytest

from algoflow.conditions import (
    BuilderOperator,
    ConditionError,
    ConditionGroup,
    ConditionRow,
    GroupType,
    Operand,
    OperandType,
    evaluate,
    generate_expression,
    parse_expression,
)


def _row(row_id, left, operator, right):
    return ConditionRow(id=row_id, left=left, operator=operator, right=right)


def _indicator(key):
    return Operand(type=OperandType.INDICATOR, value=key)


def _number(value):
    return Operand(type=OperandType.NUMBER, value=value)


def test_empty_group_is_true():
    assert generate_expression(ConditionGroup(id="root")) == "true"


def test_single_row():
    group = ConditionGroup(
        id="root",
        children=[_row("r1", _indicator("rsi_14"), BuilderOperator.LT, _number(30))],
    )

    assert generate_expression(group) == "rsi_14 < 30"


def test_nested_groups_are_parenthesized():
    inner = ConditionGroup(
        id="inner",
        type=GroupType.OR,
        children=[
            _row("r2", _indicator("rsi_14"), BuilderOperator.LT, _number(30)),
            _row("r3", _indicator("rsi_14"), BuilderOperator.GT, _number(70)),
        ],
    )
    group = ConditionGroup(
        id="root",
        type=GroupType.AND,
        children=[
            _row("r1", Operand(type=OperandType.PRICE, value="close"), BuilderOperator.GTE, _indicator("sma_20")),
            inner,
        ],
    )

    assert generate_expression(group) == "close >= sma_20 AND (rsi_14 < 30 OR rsi_14 > 70)"


def test_fractional_numbers_keep_decimals():
    group = ConditionGroup(
        id="root",
        children=[_row("r1", _indicator("macd"), BuilderOperator.GT, _number(0.5))],
    )

    assert generate_expression(group) == "macd > 0.5"


def test_generated_expression_evaluates():
    group = ConditionGroup(
        id="root",
        children=[
            _row("r1", _indicator("sma_5"), BuilderOperator.GT, _indicator("sma_20")),
            _row("r2", _indicator("rsi_14"), BuilderOperator.LTE, _number(70)),
        ],
    )

    assert evaluate(generate_expression(group), {"sma_5": 105, "sma_20": 100, "rsi_14": 55}) is True


def test_cross_rows_are_emitted_but_not_evaluable():
    group = ConditionGroup(
        id="root",
        children=[_row("r1", _indicator("sma_5"), BuilderOperator.CROSS_ABOVE, _indicator("sma_20"))],
    )
    expression = generate_expression(group)

    assert expression == "CROSS(sma_5, sma_20) == 1"
    with pytest.raises(ConditionError):
        evaluate(expression, {"sma_5": 1, "sma_20": 2})


def test_cross_below_uses_minus_one():
    group = ConditionGroup(
        id="root",
        children=[_row("r1", _indicator("a"), BuilderOperator.CROSS_BELOW, _indicator("b"))],
    )

    assert generate_expression(group) == "CROSS(a, b) == -1"


@pytest.mark.parametrize("expression, left_type, operator, right_type", [
    ("rsi_14 < 30", OperandType.INDICATOR, BuilderOperator.LT, OperandType.NUMBER),
    ("close >= sma_20", OperandType.PRICE, BuilderOperator.GTE, OperandType.INDICATOR),
    ("macd.line != macd.signal", OperandType.INDICATOR, BuilderOperator.NEQ, OperandType.INDICATOR),
])
def test_parse_simple_comparison(expression, left_type, operator, right_type):
    group = parse_expression(expression)

    assert group is not None
    assert group.type is GroupType.AND
    assert len(group.children) == 1
    row = group.children[0]
    assert row.left.type is left_type
    assert row.operator is operator
    assert row.right.type is right_type


def test_parse_number_operand_is_float():
    group = parse_expression("rsi_14 > 70.5")

    assert group.children[0].right.value == 70.5


@pytest.mark.parametrize("expression", [
    "",
    "   ",
    "a > 1 AND b < 2",
    "(a > 1)",
    "a >",
])
def test_parse_rejects_other_shapes(expression):
    assert parse_expression(expression) is None


def test_parse_then_generate_is_stable():
    group = parse_expression("sma_5 > sma_20")

    assert generate_expression(group) == "sma_5 > sma_20"
