"""Exceptions raised while constructing rewrite rules.

Applying a rule has no error channel: conditions and appliers are expected
to be total, and hitting the application limit is a capped result rather
than a failure.
"""

from __future__ import annotations


class RewriteError(Exception):
    """Base class for every error raised by eqrewrite."""


class InvalidRewrite(RewriteError):
    """A rule failed validation in :meth:`RewriteBuilder.build`."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"invalid rewrite {name!r}: {reason}")


class ParseError(RewriteError):
    """Pattern text could not be parsed.

    Attributes:
        text: The offending input, verbatim.
        reason: What the parser objected to.
    """

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"cannot parse {text!r}: {reason}")
