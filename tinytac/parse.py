"""tinytac parser — recursive descent, one method per grammar production."""

from __future__ import annotations

from .ast import BinaryExpr, CallExpr, Expr, Identifier, Literal, Program, Stmt, VarDecl
from .tokens import TK_EOF, TK_IDENT, TK_KEYWORD, TK_NUMBER, TK_OP, TK_PUNCT, Token


class ParseError(Exception):
    """Unexpected or missing token."""

    def __init__(self, expected: str, found: str, line: int):
        self.expected: str = expected
        self.found: str = found
        self.line: int = line
        self.msg: str = "expected " + expected + ", got '" + found + "'"
        super().__init__(self.msg + " at line " + str(line))


class Parser:
    """Recursive descent parser over a token list ending in TK_EOF."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != TK_EOF:
            self.pos += 1
        return tok

    def at(self, kind: str, lexeme: str) -> bool:
        tok = self.current()
        return tok.kind == kind and tok.lexeme == lexeme

    def at_type(self, kind: str) -> bool:
        return self.current().kind == kind

    def accept(self, kind: str, lexeme: str) -> bool:
        """Consume the current token if it matches; report whether it did."""
        if self.at(kind, lexeme):
            self.advance()
            return True
        return False

    def expect(self, kind: str, lexeme: str, expected: str) -> Token:
        if not self.at(kind, lexeme):
            raise self.error(expected)
        return self.advance()

    def expect_ident(self, expected: str) -> Token:
        if not self.at_type(TK_IDENT):
            raise self.error(expected)
        return self.advance()

    def error(self, expected: str) -> ParseError:
        tok = self.current()
        return ParseError(expected, tok.lexeme, tok.line)

    # ── Statements ───────────────────────────────────────────

    def parse_program(self) -> Program:
        body: list[Stmt] = []
        while not self.at_type(TK_EOF):
            body.append(self.parse_stmt())
        return Program(body)

    def parse_stmt(self) -> Stmt:
        if self.at(TK_KEYWORD, "let") or self.at(TK_KEYWORD, "const"):
            return self.parse_var_decl()
        return self.parse_expr_stmt()

    def parse_var_decl(self) -> VarDecl:
        """VarDecl = ( 'let' | 'const' ) IDENT '=' Expr ';'?"""
        keyword = self.advance()
        name_tok = self.expect_ident("variable name after '" + keyword.lexeme + "'")
        self.expect(TK_OP, "=", "'=' after variable name")
        value = self.parse_expr()
        self.accept(TK_PUNCT, ";")
        return VarDecl(keyword.line, keyword.lexeme, name_tok.lexeme, value)

    def parse_expr_stmt(self) -> Expr:
        """ExprStmt = Expr ';'?"""
        expr = self.parse_expr()
        self.accept(TK_PUNCT, ";")
        return expr

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        return self.parse_sum()

    def parse_sum(self) -> Expr:
        """Sum = Product ( ( '+' | '-' ) Product )*"""
        left = self.parse_product()
        while self.at(TK_OP, "+") or self.at(TK_OP, "-"):
            op = self.advance().lexeme
            right = self.parse_product()
            left = BinaryExpr(left.line, op, left, right)
        return left

    def parse_product(self) -> Expr:
        """Product = Primary ( ( '*' | '/' ) Primary )*"""
        left = self.parse_primary()
        while self.at(TK_OP, "*") or self.at(TK_OP, "/"):
            op = self.advance().lexeme
            right = self.parse_primary()
            left = BinaryExpr(left.line, op, left, right)
        return left

    def parse_arg_list(self) -> list[Expr]:
        """ArgList = ( Expr ( ',' Expr )* )?"""
        args: list[Expr] = []
        if self.at(TK_PUNCT, ")"):
            return args
        args.append(self.parse_expr())
        while self.accept(TK_PUNCT, ","):
            args.append(self.parse_expr())
        return args

    def parse_primary(self) -> Expr:
        """Primary = NUMBER | IDENT ( '(' ArgList ')' )? | '(' Expr ')'"""
        tok = self.current()
        if tok.kind == TK_NUMBER:
            self.advance()
            return Literal(tok.line, int(tok.lexeme))
        if tok.kind == TK_IDENT:
            self.advance()
            if self.accept(TK_PUNCT, "("):
                args = self.parse_arg_list()
                self.expect(TK_PUNCT, ")", "')' after arguments")
                return CallExpr(tok.line, tok.lexeme, args)
            return Identifier(tok.line, tok.lexeme)
        if self.accept(TK_PUNCT, "("):
            expr = self.parse_expr()
            self.expect(TK_PUNCT, ")", "')' after expression")
            return expr
        raise self.error("expression")


def parse(tokens: list[Token]) -> Program:
    """Parse a token list into a Program."""
    return Parser(tokens).parse_program()
