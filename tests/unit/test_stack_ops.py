import pytest
from src.hackvm.ast import ArithOp, CompareOp, Segment, UnaryOp
from src.hackvm.stack import (
    binary, comparison, comparison_labels, pop_d, pop_segment, push_d, push_segment, unary,
)
from hackcpu import HackCPU

def _cpu(lines, sp=256, stack=()):
    cpu = HackCPU(lines)
    cpu.poke(0, sp + len(stack))
    for i, v in enumerate(stack):
        cpu.poke(sp + i, v)
    cpu.run()
    return cpu

def test_primitives():
    assert pop_d() == ["@SP", "AM=M-1", "D=M"]
    assert push_d() == ["@SP", "A=M", "M=D", "@SP", "M=M+1"]

def test_binary_sequence_add():
    assert binary(ArithOp.ADD) == [
        "@SP", "AM=M-1", "D=M",
        "@R15", "M=D",
        "@SP", "AM=M-1", "D=M",
        "@R15", "D=D+M",
        "@SP", "A=M", "M=D", "@SP", "M=M+1",
    ]

@pytest.mark.parametrize("op, left, right, expected", [
    (ArithOp.ADD, 7, 3, 10),
    (ArithOp.SUB, 7, 3, 4),
    (ArithOp.SUB, 3, 7, -4),
    (ArithOp.AND, 0b1100, 0b1010, 0b1000),
    (ArithOp.OR, 0b1100, 0b1010, 0b1110),
])
def test_binary_runs_and_pops_one(op, left, right, expected):
    cpu = _cpu(binary(op), stack=(left, right))
    assert cpu.peek(0) == 257        # SP: 258 -> 257
    assert cpu.peek(256) == expected

@pytest.mark.parametrize("op, value, expected", [
    (UnaryOp.NEG, 5, -5),
    (UnaryOp.NOT, 0, -1),
    (UnaryOp.NOT, -1, 0),
])
def test_unary_is_stack_neutral(op, value, expected):
    cpu = _cpu(unary(op), stack=(value,))
    assert cpu.peek(0) == 257
    assert cpu.peek(256) == expected

def test_comparison_labels_use_index():
    out = comparison(CompareOp.EQ, 4)
    assert "(PUSH_TRUE_4)" in out and "(PUSH_FALSE_4)" in out and "(JUMP_BACK_4)" in out
    assert out[-1] == "(JUMP_BACK_4)"
    assert comparison_labels(4) == ("PUSH_TRUE_4", "PUSH_FALSE_4", "JUMP_BACK_4")

@pytest.mark.parametrize("op, left, right, expected", [
    (CompareOp.EQ, 5, 5, -1),
    (CompareOp.EQ, 5, 6, 0),
    (CompareOp.GT, 9, 2, -1),
    (CompareOp.GT, 2, 9, 0),
    (CompareOp.GT, 3, 3, 0),
    (CompareOp.LT, 2, 9, -1),
    (CompareOp.LT, 9, 2, 0),
    (CompareOp.LT, 3, 3, 0),
])
def test_comparison_pushes_boolean(op, left, right, expected):
    cpu = _cpu(comparison(op, 0), stack=(left, right))
    assert cpu.peek(0) == 257
    assert cpu.peek(256) == expected

def test_push_constant_is_immediate():
    assert push_segment(Segment.CONSTANT, 17, "X") == ["@17", "AD=A"] + push_d()

def test_pop_constant_keeps_immediate_addressing():
    out = pop_segment(Segment.CONSTANT, 3, "X")
    assert out[5:7] == ["@3", "AD=A"]
    assert "D=M" not in out[5:7]

def test_push_and_pop_local_roundtrip_through_cpu():
    lines = push_segment(Segment.LOCAL, 2, "X") + pop_segment(Segment.ARGUMENT, 1, "X")
    cpu = HackCPU(lines)
    cpu.poke(0, 256); cpu.poke(1, 300); cpu.poke(2, 400)
    cpu.poke(302, 1234)
    cpu.run()
    assert cpu.peek(401) == 1234
    assert cpu.peek(0) == 256

def test_static_and_temp_through_cpu():
    lines = (push_segment(Segment.CONSTANT, 9, "Foo") + pop_segment(Segment.STATIC, 0, "Foo")
             + push_segment(Segment.STATIC, 0, "Foo") + pop_segment(Segment.TEMP, 3, "Foo"))
    cpu = HackCPU(lines)
    cpu.poke(0, 256)
    cpu.run()
    assert cpu.peek(cpu.symbols["Foo.0"]) == 9
    assert cpu.peek(8) == 9
