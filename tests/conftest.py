"""Shared fixtures: settings with and without a formula checker."""
import pytest

from mwlint_server.core.settings import Settings
from mwlint_server.core.texcheck import CachedTexChecker, TexResult


class FakeTexChecker:
    """
    In-process stand-in for texvccheck.

    Formulas with unbalanced braces are syntax errors, ``\\unknown`` is an
    unknown function, everything else is valid and normalized by stripping
    surrounding whitespace.
    """

    def __init__(self):
        self.calls: list[str] = []

    def check(self, formula: str) -> TexResult:
        self.calls.append(formula)
        if formula.count("{") != formula.count("}"):
            return TexResult(status="syntax_error", detail="unbalanced braces")
        if "\\unknown" in formula:
            return TexResult(status="unknown_function", detail="\\unknown")
        return TexResult(status="ok", normalized=formula.strip())


@pytest.fixture
def fake_checker():
    return FakeTexChecker()


@pytest.fixture
def settings():
    """Settings without formula checking."""
    return Settings()


@pytest.fixture
def checked_settings(fake_checker):
    """Settings whose formula checks go to FakeTexChecker."""
    return Settings(tex_checker=CachedTexChecker(fake_checker, capacity=16))
