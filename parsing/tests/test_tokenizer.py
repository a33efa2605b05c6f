"""
Unit tests for tokenizer.py

Tests lexing of literals, symbols, comments and preprocessor lines.
"""

import unittest

from parsing.tokenizer import Tokenizer, tokenize
from parsing.tokens import Token, TokenKind, ParserError


def _values(text):
    return [t.value for t in tokenize(text) if not t.match(TokenKind.COMMENT)]


class TestTokenizer(unittest.TestCase):
    """Test the Tokenizer class."""

    def test_identifiers_and_symbols(self):
        tokens = tokenize("int x = a::b->c;")
        self.assertEqual([t.value for t in tokens], ["int", "x", "=", "a", "::", "b", "->", "c", ";"])
        self.assertEqual(tokens[0].kind, TokenKind.IDENTIFIER)
        self.assertEqual(tokens[2].kind, TokenKind.SYMBOL)

    def test_spacing_is_attached_to_following_token(self):
        tokens = tokenize("int  x;\n  float y;")
        self.assertEqual(tokens[1].spacing, "  ")
        self.assertEqual(tokens[3].spacing, "\n  ")
        self.assertEqual("".join(t.spacing + t.value for t in tokens), "int  x;\n  float y;")

    def test_multi_char_operators_are_greedy(self):
        self.assertEqual(_values("a <<= b"), ["a", "<<=", "b"])
        self.assertEqual(_values("f(...)"), ["f", "(", "...", ")"])
        self.assertEqual(_values("p->*m"), ["p", "->*", "m"])

    def test_closing_template_brackets_stay_separate(self):
        self.assertEqual(_values("std::vector<std::vector<int>>"), [
            "std", "::", "vector", "<", "std", "::", "vector", "<", "int", ">", ">",
        ])

    def test_integer_suffixes(self):
        tokens = tokenize("10 0x10UL 100000000000 1u 0xFFu")
        self.assertTrue(all(t.kind == TokenKind.INTEGER for t in tokens))
        self.assertEqual([t.value for t in tokens], ["10", "0x10L", "100000000000L", "1L", "0xFF"])

    def test_float_literals(self):
        tokens = tokenize("1.5f 2e10 .5 0x1p3")
        self.assertTrue(all(t.kind == TokenKind.FLOAT for t in tokens))
        self.assertEqual(tokens[0].value, "1.5f")

    def test_char_and_string_literals(self):
        tokens = tokenize("'a' '\\n' \"hi \\\"there\\\"\"")
        self.assertEqual(tokens[0].kind, TokenKind.INTEGER)
        self.assertEqual(tokens[1].value, "'\\n'")
        self.assertEqual(tokens[2].kind, TokenKind.STRING)
        self.assertEqual(tokens[2].value, "\"hi \\\"there\\\"\"")

    def test_unterminated_literal_is_lenient(self):
        tokens = tokenize("\"oops\nint x;")
        self.assertEqual(tokens[0].kind, TokenKind.STRING)
        self.assertEqual(tokens[1].value, "int")

    def test_comments_are_tokens(self):
        tokens = tokenize("/** doc */ int x; // tail\n")
        self.assertEqual(tokens[0].kind, TokenKind.COMMENT)
        self.assertEqual(tokens[0].value, "/** doc */")
        comments = [t.value for t in tokens if t.match(TokenKind.COMMENT)]
        self.assertIn("// tail", comments)

    def test_preprocessor_only_at_line_start(self):
        tokens = tokenize("#define A 1\nx # y")
        self.assertEqual(tokens[0].kind, TokenKind.PREPROCESSOR)
        hashes = [t for t in tokens if t.value == "#"]
        self.assertEqual(hashes[1].kind, TokenKind.SYMBOL)

    def test_line_continuation(self):
        tokens = tokenize("#define A \\\n  1\nint")
        values = [t.value for t in tokens]
        self.assertIn("\n", values)
        self.assertEqual(tokens[-1].value, "int")
        self.assertIn("\n", tokens[-1].spacing)

    def test_line_numbers(self):
        tokens = tokenize("a\n\nb /* x\ny */ c")
        self.assertEqual(tokens[0].line, 1)
        self.assertEqual(tokens[1].line, 3)
        self.assertEqual(tokens[-1].line, 4)

    def test_line_separator_detection(self):
        self.assertEqual(Tokenizer("a\r\nb").line_separator, "\r\n")
        self.assertEqual(Tokenizer("a\rb").line_separator, "\r")
        self.assertEqual(Tokenizer("a\nb").line_separator, "\n")
        self.assertIsNone(Tokenizer("ab").line_separator)
        tokens = Tokenizer("a\r\nb").tokenize()
        self.assertEqual(tokens[1].spacing, "\n")

    def test_filter_lines_keep(self):
        tokenizer = Tokenizer("a;\n#if WIN\nb;\n#endif\nc;\n")
        tokenizer.filter_lines(["#if WIN", "#endif"], skip=True)
        self.assertEqual(_values(tokenizer.text), ["a", ";", "c", ";"])

    def test_filter_lines_only(self):
        tokenizer = Tokenizer("a;\n// begin\nb;\n// end\nc;\n")
        tokenizer.filter_lines(["// begin", "// end"], skip=False)
        self.assertEqual(_values(tokenizer.text), ["b", ";"])

    def test_trailing_whitespace_is_kept(self):
        tokens = tokenize("x;\n\n")
        self.assertEqual(tokens[-1].kind, TokenKind.COMMENT)
        self.assertEqual(tokens[-1].spacing, "\n\n")


class TestToken(unittest.TestCase):
    """Test Token matching helpers."""

    def test_match_kinds_values_and_tokens(self):
        token = Token(TokenKind.IDENTIFIER, "class")
        self.assertTrue(token.match(TokenKind.IDENTIFIER))
        self.assertTrue(token.match("struct", "class"))
        self.assertTrue(token.match(Token(TokenKind.IDENTIFIER, "class", " ")))
        self.assertFalse(token.match(TokenKind.SYMBOL, "union"))
        self.assertTrue(token.is_keyword)

    def test_eof_never_matches_values(self):
        eof = Token(TokenKind.EOF)
        self.assertFalse(eof.match(""))
        self.assertTrue(eof.match(TokenKind.EOF))

    def test_expect_raises_with_location(self):
        token = Token(TokenKind.SYMBOL, "{", "", "demo.h", 7)
        with self.assertRaises(ParserError) as ctx:
            token.expect(";")
        self.assertEqual(ctx.exception.line, 7)
        self.assertIn("demo.h:7", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
