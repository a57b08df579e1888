import unittest

from tagval.core.rules import RuleToken, parse_rule, parse_token


class TestParseRule(unittest.TestCase):

    def test_empty_rules_have_no_tokens(self):
        self.assertEqual(parse_rule(""), [])
        self.assertEqual(parse_rule(None), [])
        self.assertEqual(parse_rule("||"), [])

    def test_order_is_preserved(self):
        keywords = [token.keyword for token in parse_rule("required|email|in:a,b")]
        self.assertEqual(keywords, ["required", "email", "in"])

    def test_bare_and_parameterised_tokens(self):
        self.assertEqual(parse_token("required"), RuleToken("required", None, "required"))
        self.assertEqual(parse_token("length_between:4,6"), RuleToken("length_between", "4,6", "length_between:4,6"))

    def test_only_first_colon_splits(self):
        token = parse_token(r"regex:^\d{2}:\d{2}$")
        self.assertEqual(token.keyword, "regex")
        self.assertEqual(token.param, r"^\d{2}:\d{2}$")

    def test_empty_parameter_is_not_missing(self):
        self.assertEqual(parse_token("in:").param, "")


if __name__ == '__main__':
    unittest.main()
