#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from typing import List

from kn_decls import Function
from kn_lexer import Token


def format_token(tok: Token) -> str:
    return f'{{ value: "{tok.text}", type: {tok.kind.display_name} }}'


def format_function(fn: Function, with_body: bool = False) -> str:
    """
    Render a parsed function for tracing, e.g.

        func add(x: int, y: int) -> int { 3 token(s) }

    With `with_body`, each body token follows on its own indented line.
    """
    args = ", ".join(f"{name}: {ty.type_name}" for name, ty in zip(fn.argument_names, fn.argument_types))
    header = f"func {fn.name}({args})"
    if fn.return_type is not None:
        header += f" -> {fn.return_type.type_name}"
    header += f" {{ {len(fn.body_tokens)} token(s) }}"

    lines: List[str] = [header]
    if with_body:
        for tok in fn.body_tokens:
            lines.append("  " + format_token(tok))
    return "\n".join(lines)
