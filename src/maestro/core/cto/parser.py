"""
Recursive descent parser for .cto model files.

Grammar (informal):

    file        := 'namespace' qname import* declaration*
    import      := 'import' qname ['.' '*']
    declaration := decorator* ['abstract'] kind NAME
                   ['identified' 'by' NAME] ['extends' qname]
                   '{' member* '}'
    member      := decorator* ('o' | '-->') TYPE ['[' ']'] NAME option*
    option      := 'optional' | 'default' '=' literal
                 | 'regex' '=' REGEX | 'range' '=' '[' [num] ',' [num] ']'
"""

from ..errors import ModelValidationError, make_model_error
from . import ir
from .lexer import Token, TokenType, tokenize

DECLARATION_KINDS = {kind.value: kind for kind in ir.DeclarationKind}


class ModelParser:
    """
    Parser for a single model file.

    Provides token navigation and one parse method per grammar rule.
    """

    def __init__(self, tokens: list[Token], file: str):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Model file name (for error reporting)
        """
        self.tokens = tokens
        self.file = file
        self.pos = 0
        self.namespace: str | None = None

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def match_word(self, *words: str) -> bool:
        """Check if current token is an identifier with one of the given spellings."""
        token = self.current_token()
        return token.type == TokenType.IDENTIFIER and token.value in words

    def error(self, message: str, token: Token | None = None):
        token = token or self.current_token()
        return make_model_error(message, self.file, token.line, token.column, self.namespace)

    def expect(self, token_type: TokenType) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ModelValidationError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            raise self.error(f"Expected {token_type.value!r}, got {token.value or token.type.value!r}")
        return self.advance()

    def expect_word(self, word: str) -> Token:
        token = self.current_token()
        if not self.match_word(word):
            raise self.error(f"Expected {word!r}, got {token.value or token.type.value!r}")
        return self.advance()

    def parse_qualified_name(self, allow_wildcard: bool = False) -> str:
        """Parse a dotted name such as ``org.acme.Vehicle`` (or ``org.acme.*``)."""
        parts = [self.expect(TokenType.IDENTIFIER).value]
        while self.match(TokenType.DOT):
            self.advance()
            if allow_wildcard and self.match(TokenType.STAR):
                self.advance()
                parts.append("*")
                break
            parts.append(self.expect(TokenType.IDENTIFIER).value)
        return ".".join(parts)

    def parse(self) -> ir.ModelFileSpec:
        """
        Parse the whole file.

        Returns:
            ModelFileSpec with namespace, imports and declarations

        Raises:
            ModelValidationError: On any syntax error
        """
        self.expect_word("namespace")
        self.namespace = self.parse_qualified_name()

        imports = []
        while self.match_word("import"):
            imports.append(self.parse_import())

        declarations = []
        while not self.match(TokenType.EOF):
            declarations.append(self.parse_declaration())

        return ir.ModelFileSpec(
            namespace=self.namespace,
            imports=imports,
            declarations=declarations,
        )

    def parse_import(self) -> ir.ImportSpec:
        token = self.expect_word("import")
        qualified = self.parse_qualified_name(allow_wildcard=True)
        namespace, _, name = qualified.rpartition(".")
        if not namespace:
            raise self.error(f"Import {qualified!r} must be fully qualified", token)
        return ir.ImportSpec(
            namespace=namespace,
            name=None if name == "*" else name,
            line=token.line,
            column=token.column,
        )

    def parse_decorators(self) -> list[ir.Decorator]:
        decorators = []
        while self.match(TokenType.AT):
            self.advance()
            name = self.expect(TokenType.IDENTIFIER).value
            arguments: list[str | float | bool] = []
            if self.match(TokenType.LPAREN):
                self.advance()
                while not self.match(TokenType.RPAREN):
                    arguments.append(self.parse_decorator_argument())
                    if not self.match(TokenType.RPAREN):
                        self.expect(TokenType.COMMA)
                self.advance()
            decorators.append(ir.Decorator(name=name, arguments=arguments))
        return decorators

    def parse_decorator_argument(self) -> str | float | bool:
        token = self.current_token()
        if token.type == TokenType.STRING:
            return self.advance().value
        if token.type == TokenType.NUMBER:
            return float(self.advance().value)
        if self.match_word("true", "false"):
            return self.advance().value == "true"
        if token.type == TokenType.IDENTIFIER:
            return self.parse_qualified_name()
        raise self.error(f"Unexpected decorator argument {token.value!r}")

    def parse_declaration(self) -> ir.DeclarationSpec:
        decorators = self.parse_decorators()
        start = self.current_token()

        abstract = False
        if self.match_word("abstract"):
            self.advance()
            abstract = True

        keyword = self.current_token()
        kind = DECLARATION_KINDS.get(keyword.value) if keyword.type == TokenType.IDENTIFIER else None
        if kind is None:
            raise self.error(
                f"Expected a declaration (asset, participant, transaction, event, concept, enum), "
                f"got {keyword.value or keyword.type.value!r}"
            )
        self.advance()
        name = self.expect(TokenType.IDENTIFIER).value

        identified_by = None
        super_type = None
        while self.match_word("identified", "extends"):
            if self.match_word("identified"):
                self.advance()
                self.expect_word("by")
                identified_by = self.expect(TokenType.IDENTIFIER).value
            else:
                self.advance()
                super_type = self.parse_qualified_name()

        self.expect(TokenType.LBRACE)
        properties: list[ir.PropertySpec] = []
        enum_values: list[str] = []
        while not self.match(TokenType.RBRACE):
            if self.match(TokenType.EOF):
                raise self.error(f"Unterminated declaration {name!r}", start)
            if kind == ir.DeclarationKind.ENUM:
                self.parse_decorators()
                self.expect_word("o")
                enum_values.append(self.expect(TokenType.IDENTIFIER).value)
            else:
                properties.append(self.parse_property())
        self.expect(TokenType.RBRACE)

        return ir.DeclarationSpec(
            kind=kind,
            name=name,
            abstract=abstract,
            identified_by=identified_by,
            super_type=super_type,
            properties=properties,
            enum_values=enum_values,
            decorators=decorators,
            line=start.line,
            column=start.column,
        )

    def parse_property(self) -> ir.PropertySpec:
        decorators = self.parse_decorators()
        start = self.current_token()

        if self.match(TokenType.ARROW):
            self.advance()
            is_relationship = True
        elif self.match_word("o"):
            self.advance()
            is_relationship = False
        else:
            raise self.error(f"Expected 'o' or '-->', got {start.value or start.type.value!r}")

        type_name = self.parse_qualified_name()
        is_array = False
        if self.match(TokenType.LBRACKET):
            self.advance()
            self.expect(TokenType.RBRACKET)
            is_array = True
        name = self.expect(TokenType.IDENTIFIER).value

        optional = False
        default = None
        regex = None
        value_range = None
        while self.match_word("optional", "default", "regex", "range"):
            option = self.advance().value
            if option == "optional":
                optional = True
                continue
            self.expect(TokenType.EQUALS)
            if option == "default":
                default = self.parse_literal()
            elif option == "regex":
                regex = self.expect(TokenType.REGEX).value
            else:
                value_range = self.parse_range()

        if is_relationship and (default is not None or regex is not None or value_range):
            raise self.error(f"Relationship {name!r} cannot have field options", start)

        return ir.PropertySpec(
            name=name,
            type_name=type_name,
            is_array=is_array,
            is_relationship=is_relationship,
            optional=optional,
            default=default,
            regex=regex,
            range=value_range,
            decorators=decorators,
            line=start.line,
            column=start.column,
        )

    def parse_literal(self) -> str:
        token = self.current_token()
        if token.type in (TokenType.STRING, TokenType.NUMBER, TokenType.IDENTIFIER):
            return self.advance().value
        raise self.error(f"Expected a default value, got {token.value or token.type.value!r}")

    def parse_range(self) -> tuple[str | None, str | None]:
        self.expect(TokenType.LBRACKET)
        lower = self.advance().value if self.match(TokenType.NUMBER) else None
        self.expect(TokenType.COMMA)
        upper = self.advance().value if self.match(TokenType.NUMBER) else None
        self.expect(TokenType.RBRACKET)
        return (lower, upper)


def parse_model(text: str, file: str) -> ir.ModelFileSpec:
    """
    Tokenize and parse one model file.

    Args:
        text: Model file contents
        file: Model file name (for error reporting)

    Returns:
        Parsed ModelFileSpec
    """
    return ModelParser(tokenize(text, file), file).parse()


def read_namespace(text: str, file: str) -> str | None:
    """
    Read only the namespace header of a model file.

    Used where the namespace must be known before the file is validated.
    Returns None if the header is missing or cannot be tokenized.
    """
    try:
        tokens = tokenize(text, file)
    except ModelValidationError:
        return None
    parser = ModelParser(tokens, file)
    if not parser.match_word("namespace"):
        return None
    parser.advance()
    try:
        return parser.parse_qualified_name()
    except ModelValidationError:
        return None
