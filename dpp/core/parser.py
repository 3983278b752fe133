import logging
from typing import List, Optional, Sequence
from .tokens import Token, TokenKind
from .errors import ParseError, InvalidAssignmentTarget
from .ast import (
    ASTNode, ProgramNode, FunctionDeclarationNode, VarDeclarationNode, TypeNode, BlockNode,
    ExpressionStatementNode, BinaryOpNode, UnaryOpNode, LiteralNode, IdentifierNode,
    FunctionCallNode,
)

# Binary precedence levels, loosest first. Each level is left-associative.
EQUALITY_OPS = ("==", "!=")
COMPARISON_OPS = ("<", "<=", ">", ">=")
TERM_OPS = ("+", "-")
FACTOR_OPS = ("*", "/")
UNARY_OPS = ("!", "-")


class DppParser:
    """Recursive-descent parser producing a ProgramNode.

    One method per grammar rule and a single cursor into the token list.
    There is no backtracking or error recovery: the first mismatch raises
    ParseError and aborts the whole parse.
    """

    def __init__(self, tokens: List[Token]):
        if not tokens or not tokens[-1].is_eof:
            raise ValueError("token stream must end with the EOF marker")
        self.tokens = tokens
        self.current = 0
        self.logger = logging.getLogger(__name__)

    def parse(self) -> ProgramNode:
        location = self._peek().location
        declarations: List[ASTNode] = []
        try:
            while not self._at_end():
                declarations.append(self._parse_declaration())
        except RecursionError:
            # each nesting level costs one pass down the precedence ladder
            raise ParseError("Expression nested too deeply", self._peek()) from None
        self.logger.debug("Parsed %d top-level declarations", len(declarations))
        return ProgramNode(declarations, location=location)

    # declarations

    def _parse_declaration(self) -> ASTNode:
        if self._accept(TokenKind.KEYWORD, "fn"):
            return self._parse_function_declaration()
        if self._accept(TokenKind.KEYWORD, "let"):
            return self._parse_variable_declaration()
        raise ParseError("Expected declaration ('fn' or 'let')", self._peek(), expected="fn")

    def _parse_function_declaration(self) -> FunctionDeclarationNode:
        name_tok = self._expect_identifier()
        self._expect(TokenKind.SEPARATOR, "(")
        parameters = self._parse_parameters()
        self._expect(TokenKind.SEPARATOR, ")")
        self._expect(TokenKind.SEPARATOR, "->")
        return_type = self._parse_type()
        body = self._parse_block()
        return FunctionDeclarationNode(name_tok.text, parameters, return_type, body,
                                       location=name_tok.location)

    def _parse_parameters(self) -> List[VarDeclarationNode]:
        parameters: List[VarDeclarationNode] = []
        if self._check(TokenKind.SEPARATOR, ")"):
            return parameters
        while True:
            name_tok = self._expect_identifier()
            self._expect(TokenKind.SEPARATOR, ":")
            param_type = self._parse_type()
            parameters.append(VarDeclarationNode(name_tok.text, param_type,
                                                 location=name_tok.location))
            if not self._accept(TokenKind.SEPARATOR, ","):
                return parameters

    def _parse_type(self) -> TypeNode:
        tok = self._expect_identifier("type name")
        return TypeNode(tok.text, location=tok.location)

    def _parse_variable_declaration(self) -> VarDeclarationNode:
        name_tok = self._expect_identifier()
        self._expect(TokenKind.SEPARATOR, ":")
        var_type = self._parse_type()

        initializer = None
        if self._accept(TokenKind.OPERATOR, "="):
            initializer = self._parse_expression()

        self._expect(TokenKind.SEPARATOR, ";")
        return VarDeclarationNode(name_tok.text, var_type, initializer,
                                  location=name_tok.location)

    # statements

    def _parse_block(self) -> BlockNode:
        open_tok = self._expect(TokenKind.SEPARATOR, "{")
        statements: List[ASTNode] = []
        while not self._check(TokenKind.SEPARATOR, "}") and not self._at_end():
            statements.append(self._parse_statement())
        self._expect(TokenKind.SEPARATOR, "}")
        return BlockNode(statements, location=open_tok.location)

    def _parse_statement(self) -> ASTNode:
        if self._accept(TokenKind.KEYWORD, "let"):
            return self._parse_variable_declaration()
        return self._parse_expression_statement()

    def _parse_expression_statement(self) -> ExpressionStatementNode:
        location = self._peek().location
        expr = self._parse_expression()
        self._expect(TokenKind.SEPARATOR, ";")
        return ExpressionStatementNode(expr, location=location)

    # expressions

    def _parse_expression(self) -> ASTNode:
        return self._parse_assignment()

    def _parse_assignment(self) -> ASTNode:
        expr = self._parse_equality()

        equals = self._accept(TokenKind.OPERATOR, "=")
        if equals is None:
            return expr

        value = self._parse_assignment()
        if not isinstance(expr, IdentifierNode):
            raise InvalidAssignmentTarget(equals)
        return BinaryOpNode(expr, "=", value, location=equals.location)

    def _parse_binary_level(self, operators: Sequence[str], operand) -> ASTNode:
        expr = operand()
        while True:
            op_tok = self._accept_any(TokenKind.OPERATOR, operators)
            if op_tok is None:
                return expr
            right = operand()
            expr = BinaryOpNode(expr, op_tok.text, right, location=op_tok.location)

    def _parse_equality(self) -> ASTNode:
        return self._parse_binary_level(EQUALITY_OPS, self._parse_comparison)

    def _parse_comparison(self) -> ASTNode:
        return self._parse_binary_level(COMPARISON_OPS, self._parse_term)

    def _parse_term(self) -> ASTNode:
        return self._parse_binary_level(TERM_OPS, self._parse_factor)

    def _parse_factor(self) -> ASTNode:
        return self._parse_binary_level(FACTOR_OPS, self._parse_unary)

    def _parse_unary(self) -> ASTNode:
        op_tok = self._accept_any(TokenKind.OPERATOR, UNARY_OPS)
        if op_tok is not None:
            operand = self._parse_unary()
            return UnaryOpNode(op_tok.text, operand, location=op_tok.location)
        return self._parse_primary()

    def _parse_primary(self) -> ASTNode:
        t = self._peek()
        if self._accept(TokenKind.LITERAL):
            return LiteralNode(t.text, location=t.location)
        if self._accept(TokenKind.IDENTIFIER):
            if self._accept(TokenKind.SEPARATOR, "("):
                return FunctionCallNode(t.text, self._parse_arguments(), location=t.location)
            return IdentifierNode(t.text, location=t.location)
        if self._accept(TokenKind.SEPARATOR, "("):
            expr = self._parse_expression()
            self._expect(TokenKind.SEPARATOR, ")")
            return expr
        raise ParseError("Expected expression", t, expected="expression")

    def _parse_arguments(self) -> List[ASTNode]:
        args: List[ASTNode] = []
        if self._accept(TokenKind.SEPARATOR, ")"):
            return args
        while True:
            args.append(self._parse_expression())
            if self._accept(TokenKind.SEPARATOR, ")"):
                return args
            self._expect(TokenKind.SEPARATOR, ",")

    # token helpers

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _at_end(self) -> bool:
        return self._peek().is_eof

    def _next(self) -> Token:
        t = self.tokens[self.current]
        if not t.is_eof:
            self.current += 1
        return t

    def _check(self, kind: TokenKind, text: str = "") -> bool:
        if self._at_end():
            return False
        return self._peek().matches(kind, text)

    def _accept(self, kind: TokenKind, text: str = "") -> Optional[Token]:
        if self._check(kind, text):
            return self._next()
        return None

    def _accept_any(self, kind: TokenKind, texts: Sequence[str]) -> Optional[Token]:
        for text in texts:
            tok = self._accept(kind, text)
            if tok is not None:
                return tok
        return None

    def _expect(self, kind: TokenKind, text: str = "") -> Token:
        tok = self._accept(kind, text)
        if tok is not None:
            return tok
        if text:
            message = f"Expected {kind.value} '{text}'"
        else:
            message = f"Expected {kind.value}"
        raise ParseError(message, self._peek(), expected=text or kind.value)

    def _expect_identifier(self, what: str = "identifier") -> Token:
        tok = self._accept(TokenKind.IDENTIFIER)
        if tok is None:
            raise ParseError(f"Expected {what}", self._peek(), expected=TokenKind.IDENTIFIER.value)
        return tok


def parse(tokens: List[Token]) -> ProgramNode:
    return DppParser(tokens).parse()
