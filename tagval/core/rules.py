"""Tokenizer for rule strings.

A rule string such as ``"required|in:admin,user,guest"`` is an ordered list
of tokens separated by ``|``. Each token is a bare keyword (``required``) or
a keyword followed by a colon and a parameter payload (``in:admin,user``).
Only the first colon splits, so ``regex:^\\d{2}:\\d{2}$`` keeps its pattern
intact.
"""
from typing import List, NamedTuple, Optional

RULE_SEPARATOR = "|"
PARAM_SEPARATOR = ":"


class RuleToken(NamedTuple):
    """One parsed unit of a rule string."""

    keyword: str
    param: Optional[str]
    raw: str


def parse_token(raw: str) -> RuleToken:
    """Splits a single token into its keyword and optional parameter."""
    keyword, sep, param = raw.partition(PARAM_SEPARATOR)
    return RuleToken(keyword.strip(), param if sep else None, raw)


def parse_rule(rule: Optional[str]) -> List[RuleToken]:
    """Splits a rule string into tokens, preserving their order.

    Empty pieces (an empty rule string, or a stray ``||``) produce no tokens.

    Args:
        rule (Optional[str]): The rule string attached to a field.

    Returns:
        List[RuleToken]: The tokens in the order they appear.
    """
    if not rule:
        return []
    return [parse_token(piece) for piece in rule.split(RULE_SEPARATOR) if piece.strip()]
