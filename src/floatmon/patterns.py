"""Regular expressions describing std float math call sites in emitted code."""

from __future__ import annotations

import re

from floatmon.models import EmissionMode

FORBIDDEN_FUNCTIONS = (
    "abs",
    "abs_sub",
    "acos",
    "acosh",
    "asin",
    "asinh",
    "atan",
    "atan2",
    "atanh",
    "cbrt",
    "ceil",
    "copysign",
    "cos",
    "cosh",
    "div_euclid",
    "exp",
    "exp2",
    "exp_m1",
    "floor",
    "fract",
    "hypot",
    "ln",
    "ln_1p",
    "log",
    "log10",
    "log2",
    "mul_add",
    "powf",
    "powi",
    "rem_euclid",
    "round",
    "signum",
    "sin",
    "sin_cos",
    "sinh",
    "sqrt",
    "tan",
    "tanh",
    "trunc",
)

_FUNCTIONS = "|".join(FORBIDDEN_FUNCTIONS)

# MIR spells the inherent impl as `<impl f64>`; the width must match the path.
MIR_PATTERN = re.compile(rf"std::(f32|f64)::<impl \1>::({_FUNCTIONS})")
# Assembly symbols carry a numbered impl block instead.
ASM_PATTERN = re.compile(rf"std::(f32|f64)::impl\$[0-9]+::({_FUNCTIONS})")

_PATTERNS: dict[EmissionMode, re.Pattern[str]] = {
    EmissionMode.MIR: MIR_PATTERN,
    EmissionMode.ASM: ASM_PATTERN,
}


def pattern_for(mode: EmissionMode) -> re.Pattern[str]:
    return _PATTERNS[mode]
