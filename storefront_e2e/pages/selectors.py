# storefront_e2e/pages/selectors.py
from __future__ import annotations


def xpath_literal(text: str) -> str:
    """Quote `text` as an XPath string; text holding both quote kinds becomes a concat()."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in text.split("'")) + ")"


def xpath_value(token: str) -> str:
    """XPath operand for a token: numbers unquoted, anything else as a string literal."""
    return token if token.isdigit() else xpath_literal(token)


def xpath_has_class(class_name: str) -> str:
    """Predicate matching a whole word in @class."""
    return f"contains(concat(' ', normalize-space(@class), ' '), ' {class_name} ')"


def xpath_contains_text(tag: str, text: str) -> str:
    return f"{tag}[contains(., {xpath_literal(text)})]"
