import unittest
import sys
from pathlib import Path

# Add src to path to allow imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

from dbc_transmuter.core.tokenizer import split_lines, tokenize, tokenize_line, unquote


class TestTokenizer(unittest.TestCase):
    def test_message_line(self):
        self.assertEqual(
            tokenize_line("BO_ 123 Message: 8 Vector__XXX"),
            ["BO_", "123", "Message:", "8", "Vector__XXX"],
        )

    def test_quoted_span_is_one_token(self):
        tokens = tokenize_line(' SG_ Speed : 0|16@1+ (0.1,0) [0|250] "km h" ECU')
        self.assertEqual(len(tokens), 8)
        self.assertEqual(tokens[6], '"km h"')

    def test_escaped_quote_inside_span(self):
        tokens = tokenize_line(r'VAL_ 1 Sig 0 "say \"hi\"" ;')
        self.assertEqual(tokens[4], r'"say \"hi\""')
        self.assertEqual(unquote(tokens[4]), 'say "hi"')

    def test_empty_quoted_unit(self):
        tokens = tokenize_line('SG_ A : 0|1@1+ (1,0) [0|1] "" ECU')
        self.assertEqual(tokens[6], '""')
        self.assertEqual(unquote(tokens[6]), "")

    def test_semicolon_after_label(self):
        self.assertEqual(
            tokenize_line('VAL_ 1 Sig 0 "Off" 1 "On";'),
            ["VAL_", "1", "Sig", "0", '"Off"', "1", '"On"', ";"],
        )

    def test_blank_line(self):
        self.assertEqual(tokenize_line("   \t "), [])

    def test_unquote_leaves_plain_tokens(self):
        self.assertEqual(unquote("Vector__XXX"), "Vector__XXX")

    def test_lines_keep_numbering(self):
        text = "BO_ 1 A: 8 X\r\n\r\n SG_ S : 0|8@1+ (1,0) [0|255] \"\" X\rlast"
        self.assertEqual(len(split_lines(text)), 4)
        numbered = list(tokenize(text))
        self.assertEqual([n for n, _ in numbered], [1, 2, 3, 4])
        self.assertEqual(numbered[1][1], [])
        self.assertEqual(numbered[2][1][0], "SG_")
        self.assertEqual(numbered[3][1], ["last"])


if __name__ == "__main__":
    unittest.main()
