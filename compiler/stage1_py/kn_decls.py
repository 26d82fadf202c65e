#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Deque, List, Optional

from kn_internal_error import ICELocation, InternalCompilerError
from kn_lexer import Keyword, KEYWORDS, Lexer, Token, TokenKind, is_keyword
from kn_values import ValueType, lookup_type


# ==========================
# Function declarations
# ==========================

@dataclass
class Function:
    name: str
    argument_names: List[str] = field(default_factory=list)
    argument_types: List[ValueType] = field(default_factory=list)
    body_tokens: List[Token] = field(default_factory=list)
    return_type: Optional[ValueType] = None
    token: Optional[Token] = field(default=None, compare=False, repr=False)

    @property
    def arity(self) -> int:
        return len(self.argument_types)


@dataclass
class ParseError(Exception):
    message: str
    token: Optional[Token] = None
    filename: Optional[str] = None


class DeclState(Enum):
    IDLE = auto()
    SEEN_KEYWORD = auto()  # after 'func'
    SEEN_NAME = auto()  # after 'func name'
    PARSING_ARGS = auto()  # inside '( ... )'
    SEEN_SIGNATURE = auto()  # after ')'
    SEEN_RETURNER = auto()  # after '->'
    COLLECTING_BODY = auto()  # inside '{ ... }'


class DeclarationParser:
    """
    Token-driven recognizer for

        func name(arg: type, ...) [-> type] { body }

    Tokens are popped from a pending queue and read at most once. Bodies are
    not parsed; their tokens are kept verbatim on the Function.
    Everything other than a function declaration is reported as unsupported.
    """

    def __init__(self, tokens: List[Token], filename: Optional[str] = None) -> None:
        self.pending: Deque[Token] = deque(tokens)
        self.filename = filename
        self.state = DeclState.IDLE
        self.current: Optional[Function] = None
        self.functions: List[Function] = []
        self._last: Optional[Token] = None

    @classmethod
    def from_source(cls, source: str) -> "DeclarationParser":
        lexer = Lexer.from_source(source)
        return cls(lexer.tokenize(), lexer.filename)

    # --- token utilities ---

    def _pop(self) -> Optional[Token]:
        if not self.pending:
            return None
        self._last = self.pending.popleft()
        return self._last

    def _error(self, message: str, tok: Optional[Token] = None) -> ParseError:
        return ParseError(message, tok if tok is not None else self._last, self.filename)

    def _unfinished(self) -> ParseError:
        return self._error("[PAR-0060] unfinished function declaration")

    # --- entry point ---

    def parse(self) -> List[Function]:
        while True:
            tok = self._pop()
            if tok is None:
                break
            self._step(tok)

        if self.state is DeclState.IDLE:
            return self.functions
        if self.state is DeclState.SEEN_KEYWORD:
            raise self._error("[PAR-0012] expected function name after 'func'")
        raise self._unfinished()

    def _step(self, tok: Token) -> None:
        state = self.state
        if state is DeclState.IDLE:
            self._on_idle(tok)
        elif state is DeclState.SEEN_KEYWORD:
            self._on_keyword(tok)
        elif state is DeclState.SEEN_NAME:
            self._on_name(tok)
        elif state is DeclState.SEEN_SIGNATURE:
            self._on_signature(tok)
        elif state is DeclState.SEEN_RETURNER:
            self._on_returner(tok)
        else:
            # PARSING_ARGS and COLLECTING_BODY drain the queue themselves
            raise InternalCompilerError(
                f"[ICE-0200] declaration parser stepped in state {state.name}",
                ICELocation(self.filename, tok.line, tok.column),
            )

    # --- transitions ---

    def _on_idle(self, tok: Token) -> None:
        if tok.kind is TokenKind.NAME and KEYWORDS.get(tok.text) is Keyword.FUNC:
            self.state = DeclState.SEEN_KEYWORD
            return
        if tok.kind is TokenKind.OPEN_PAREN:
            raise self._error("[PAR-0010] function has no name", tok)
        if tok.kind is TokenKind.OPEN_BRACE:
            raise self._error("[PAR-0050] '{' unexpected here: no function declaration in progress", tok)
        raise self._error(
            f"[PAR-0090] unsupported construct: {tok.kind.display_name} {tok!r} outside a function "
            f"declaration is not supported yet",
            tok,
        )

    def _on_keyword(self, tok: Token) -> None:
        if tok.kind is TokenKind.OPEN_PAREN:
            raise self._error("[PAR-0010] function has no name", tok)
        if tok.kind is not TokenKind.NAME:
            raise self._error(f"[PAR-0012] expected function name after 'func', got {tok!r}", tok)
        if is_keyword(tok.text):
            raise self._error(f"[PAR-0011] invalid function name '{tok.text}': reserved keyword", tok)
        self.current = Function(name=tok.text, token=tok)
        self.state = DeclState.SEEN_NAME

    def _on_name(self, tok: Token) -> None:
        if tok.kind is not TokenKind.OPEN_PAREN:
            raise self._error(f"[PAR-0013] expected '(' after function name '{self.current.name}', got {tok!r}", tok)
        self.state = DeclState.PARSING_ARGS
        self._parse_arguments(tok)
        self.state = DeclState.SEEN_SIGNATURE

    def _on_signature(self, tok: Token) -> None:
        if tok.kind is TokenKind.ARROW:
            self.state = DeclState.SEEN_RETURNER
            return
        if tok.kind is TokenKind.OPEN_BRACE:
            self._collect_body(tok)
            return
        raise self._error(f"[PAR-0061] expected '->' or '{{' after argument list, got {tok!r}", tok)

    def _on_returner(self, tok: Token) -> None:
        if tok.kind is not TokenKind.NAME:
            raise self._error(f"[PAR-0062] expected return type after '->', got {tok!r}", tok)
        self.current.return_type = self._resolve_type(tok)

        brace = self._pop()
        if brace is None:
            raise self._unfinished()
        if brace.kind is not TokenKind.OPEN_BRACE:
            raise self._error(f"[PAR-0063] expected '{{' after return type, got {brace!r}", brace)
        self._collect_body(brace)

    # --- sub-scanners ---

    def _resolve_type(self, tok: Token) -> ValueType:
        vt = lookup_type(tok.text)
        if vt is None:
            raise self._error(f"[PAR-0030] unknown type '{tok.text}'", tok)
        return vt

    def _parse_arguments(self, open_paren: Token) -> None:
        fn = self.current
        arg_name: Optional[Token] = None  # declared, still waiting for ': type'
        seen_colon = False
        expect_arg = False  # after ','

        while True:
            tok = self._pop()
            if tok is None:
                raise self._error("[PAR-0024] unclosed parenthesis in function declaration", open_paren)

            if tok.kind is TokenKind.CLOSE_PAREN:
                if arg_name is not None:
                    raise self._error(f"[PAR-0021] missing type for argument '{arg_name.text}'", tok)
                if expect_arg:
                    raise self._error("[PAR-0022] expected argument after ','", tok)
                return

            if tok.kind is TokenKind.NAME:
                if arg_name is None:
                    if fn.argument_names and not expect_arg:
                        raise self._error(f"[PAR-0022] expected ',' between arguments, got {tok!r}", tok)
                    arg_name = tok
                    expect_arg = False
                elif not seen_colon:
                    raise self._error(f"[PAR-0020] expected ':' after argument '{arg_name.text}', got {tok!r}", tok)
                else:
                    arg_type = self._resolve_type(tok)
                    # a redeclared name keeps its first type
                    if arg_name.text not in fn.argument_names:
                        fn.argument_names.append(arg_name.text)
                        fn.argument_types.append(arg_type)
                    arg_name = None
                    seen_colon = False
                continue

            if tok.kind is TokenKind.COLON:
                if arg_name is None or seen_colon:
                    raise self._error("[PAR-0020] ':' must directly follow an argument name", tok)
                seen_colon = True
                continue

            if tok.kind is TokenKind.COMMA:
                if arg_name is not None:
                    raise self._error(f"[PAR-0021] missing type for argument '{arg_name.text}'", tok)
                if expect_arg or not fn.argument_names:
                    raise self._error("[PAR-0022] expected argument before ','", tok)
                expect_arg = True
                continue

            if tok.kind in (TokenKind.OPEN_BRACE, TokenKind.ARROW):
                # the signature moved on without ')'
                raise self._error("[PAR-0024] unclosed parenthesis in function declaration", open_paren)
            raise self._error(f"[PAR-0020] unexpected {tok!r} in argument list", tok)

    def _collect_body(self, open_brace: Token) -> None:
        self.state = DeclState.COLLECTING_BODY
        fn = self.current
        depth = 1
        while True:
            tok = self._pop()
            if tok is None:
                raise self._error(f"[PAR-0070] unclosed function body for '{fn.name}'", open_brace)
            if tok.kind is TokenKind.OPEN_BRACE:
                depth += 1
            elif tok.kind is TokenKind.CLOSE_BRACE:
                depth -= 1
                if depth == 0:
                    break
            fn.body_tokens.append(tok)

        self.functions.append(fn)
        self.current = None
        self.state = DeclState.IDLE
