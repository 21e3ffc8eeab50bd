"""
Mini-C Parser
=============
Recursive-descent parser with one token of lookahead. It builds no tree:
it validates the token stream against the grammar and fires the semantic
hooks (declare, scope enter/exit, use checks) while it parses.

Grammar:
  program        := stmtList EOF
  stmtList       := { statement }                    until '}' or EOF
  statement      := decl | block | ifStmt | whileStmt | forStmt
                  | returnStmt | exprStmt
  decl           := 'int' IDENT [ '=' expression ] ';'
  block          := '{' stmtList '}'
  ifStmt         := 'if' '(' expression ')' statement [ 'else' statement ]
  whileStmt      := 'while' '(' expression ')' statement
  forStmt        := 'for' '(' [expr] ';' [expr] ';' [expr] ')' statement
  returnStmt     := 'return' [ expression ] ';'
  exprStmt       := [ expression ] ';'
  expression     := assignment
  assignment     := logicalOr [ '=' assignment ]
  logicalOr      := logicalAnd { '||' logicalAnd }
  logicalAnd     := equality { '&&' equality }
  equality       := relational { ('==' | '!=') relational }
  relational     := additive { ('<' | '<=' | '>' | '>=') additive }
  additive       := multiplicative { ('+' | '-') multiplicative }
  multiplicative := unary { ('*' | '/') unary }
  unary          := ('+' | '-' | '!') unary | primary
  primary        := IDENT | NUMBER | '(' expression ')'

The first mismatch raises; there is no recovery.
"""
from contextlib import contextmanager
from typing import Iterator

from .errors import LexicalError, ParseError
from .lexer import Lexer, Token, TokenKind
from .reporter import Reporter, TokenEvent
from .symbols import ScopeManager


class Parser:
    """
    Recursive-descent validator for Mini-C.

    Usage:
        parser = Parser(Lexer(source), ScopeManager())
        parser.parse()      # raises an AnalysisError on the first defect

    ``max_depth`` bounds statement nesting, parentheses, assignment chains
    and unary prefixes so hostile input fails with a ParseError instead of exhausting
    the interpreter stack. None disables the guard.
    """

    def __init__(self, lexer: Lexer, scopes: ScopeManager,
                 reporter: Reporter | None = None,
                 max_depth: int | None = 100):
        self.lexer = lexer
        self.scopes = scopes
        self.reporter = reporter or scopes.reporter
        self.max_depth = max_depth
        self.depth = 0
        self.current_token: Token | None = None

    # ─────────────────────────────────────────────────────────
    #  Token Primitives
    # ─────────────────────────────────────────────────────────

    def advance_token(self) -> Token:
        """Pull the next token, trace it and make it the lookahead."""
        token = self.lexer.next_token()
        lexeme = None if token.kind == TokenKind.EOF else token.lexeme
        self.reporter.emit(TokenEvent(token.kind.name, lexeme, token.line, token.column))
        self.current_token = token
        if token.kind == TokenKind.INVALID:
            raise LexicalError.at(token, f"invalid character '{token.lexeme}'")
        return token

    def _error(self, message: str) -> ParseError:
        return ParseError.at(self.current_token, message)

    def _at_delimiter(self, ch: str) -> bool:
        return self.current_token.is_delimiter(ch)

    def _at_operator(self, *ops: str) -> bool:
        return any(self.current_token.is_operator(op) for op in ops)

    def _at_keyword(self, word: str) -> bool:
        return self.current_token.is_keyword(word)

    def _expect_delimiter(self, ch: str) -> None:
        if not self._at_delimiter(ch):
            raise self._error(f"expected delimiter '{ch}'")
        self.advance_token()

    def _expect_operator(self, op: str) -> None:
        if not self._at_operator(op):
            raise self._error(f'expected operator "{op}"')
        self.advance_token()

    def _expect_keyword(self, word: str) -> None:
        if not self._at_keyword(word):
            raise self._error(f'expected keyword "{word}"')
        self.advance_token()

    @contextmanager
    def _nested(self) -> Iterator[None]:
        if self.max_depth is not None and self.depth >= self.max_depth:
            raise self._error(f"nesting too deep (limit {self.max_depth})")
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    # ─────────────────────────────────────────────────────────
    #  Statements
    # ─────────────────────────────────────────────────────────

    def parse(self) -> None:
        """Validate a whole program, pulling the first token."""
        self.advance_token()
        try:
            self._parse_program()
        except RecursionError:
            # max_depth set above what the interpreter stack can hold, or None
            raise self._error("nesting too deep") from None

    def _parse_program(self) -> None:
        self._parse_statement_list()
        if self.current_token.kind != TokenKind.EOF:
            raise self._error("expected end of input")

    def _parse_statement_list(self) -> None:
        while self.current_token.kind != TokenKind.EOF and not self._at_delimiter("}"):
            self._parse_statement()

    def _parse_statement(self) -> None:
        with self._nested():
            if self._at_keyword("int"):
                self._parse_declaration()
            elif self._at_delimiter("{"):
                self._parse_block()
            elif self._at_keyword("if"):
                self._parse_if()
            elif self._at_keyword("while"):
                self._parse_while()
            elif self._at_keyword("for"):
                self._parse_for()
            elif self._at_keyword("return"):
                self._parse_return()
            else:
                self._parse_expression_statement()

    def _parse_declaration(self) -> None:
        """decl := 'int' IDENT [ '=' expression ] ';'"""
        self._expect_keyword("int")
        name_token = self.current_token
        if name_token.kind != TokenKind.IDENTIFIER:
            raise self._error("expected identifier after 'int'")
        # Declared before the initializer is parsed: `int x = x;` is accepted
        self.scopes.declare(name_token.lexeme, "int", name_token)
        self.advance_token()
        if self._at_operator("="):
            self.advance_token()
            self._parse_expression()
        self._expect_delimiter(";")

    def _parse_block(self) -> None:
        """block := '{' stmtList '}'"""
        self._expect_delimiter("{")
        self.scopes.enter_scope()
        self._parse_statement_list()
        self.scopes.exit_scope()
        self._expect_delimiter("}")

    def _parse_if(self) -> None:
        self._expect_keyword("if")
        self._parse_condition()
        self._parse_statement()
        if self._at_keyword("else"):
            self.advance_token()
            self._parse_statement()

    def _parse_while(self) -> None:
        self._expect_keyword("while")
        self._parse_condition()
        self._parse_statement()

    def _parse_condition(self) -> None:
        self._expect_delimiter("(")
        self._parse_expression()
        self._expect_delimiter(")")

    def _parse_for(self) -> None:
        """forStmt := 'for' '(' [expr] ';' [expr] ';' [expr] ')' statement"""
        self._expect_keyword("for")
        self._expect_delimiter("(")
        for terminator in (";", ";", ")"):
            if not self._at_delimiter(terminator):
                self._parse_expression()
            self._expect_delimiter(terminator)
        self._parse_statement()

    def _parse_return(self) -> None:
        self._expect_keyword("return")
        if not self._at_delimiter(";"):
            self._parse_expression()
        self._expect_delimiter(";")

    def _parse_expression_statement(self) -> None:
        if not self._at_delimiter(";"):
            self._parse_expression()
        self._expect_delimiter(";")

    # ─────────────────────────────────────────────────────────
    #  Expressions (lowest to highest precedence)
    # ─────────────────────────────────────────────────────────

    def _parse_expression(self) -> None:
        with self._nested():
            self._parse_assignment()

    def _parse_assignment(self) -> None:
        """assignment := logicalOr [ '=' assignment ]   (right-associative)"""
        self._parse_logical_or()
        if self._at_operator("="):
            self.advance_token()
            with self._nested():
                self._parse_assignment()

    def _parse_logical_or(self) -> None:
        self._parse_logical_and()
        while self._at_operator("||"):
            self.advance_token()
            self._parse_logical_and()

    def _parse_logical_and(self) -> None:
        self._parse_equality()
        while self._at_operator("&&"):
            self.advance_token()
            self._parse_equality()

    def _parse_equality(self) -> None:
        self._parse_relational()
        while self._at_operator("==", "!="):
            self.advance_token()
            self._parse_relational()

    def _parse_relational(self) -> None:
        self._parse_additive()
        while self._at_operator("<", "<=", ">", ">="):
            self.advance_token()
            self._parse_additive()

    def _parse_additive(self) -> None:
        self._parse_multiplicative()
        while self._at_operator("+", "-"):
            self.advance_token()
            self._parse_multiplicative()

    def _parse_multiplicative(self) -> None:
        self._parse_unary()
        while self._at_operator("*", "/"):
            self.advance_token()
            self._parse_unary()

    def _parse_unary(self) -> None:
        if self._at_operator("+", "-", "!"):
            self.advance_token()
            with self._nested():
                self._parse_unary()
        else:
            self._parse_primary()

    def _parse_primary(self) -> None:
        """primary := IDENT | NUMBER | '(' expression ')'"""
        token = self.current_token
        if token.kind == TokenKind.IDENTIFIER:
            self.scopes.require_declared(token.lexeme, token)
            self.advance_token()
        elif token.kind == TokenKind.NUMBER:
            self.advance_token()
        elif self._at_delimiter("("):
            with self._nested():
                self.advance_token()
                self._parse_expression()
                self._expect_delimiter(")")
        else:
            raise self._error("expected identifier, number or '('")
