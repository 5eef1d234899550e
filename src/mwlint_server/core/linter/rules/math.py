"""Math formula rules."""
from typing import Iterator

from ...tree import Element, Formula
from ..models import Example, Lint, Severity
from .base import Rule

# Unicode to LaTeX mapping for symbols commonly pasted into <math>
UNICODE_TO_LATEX = {
    # Greek letters
    'α': r'\alpha',
    'β': r'\beta',
    'γ': r'\gamma',
    'δ': r'\delta',
    'ε': r'\varepsilon',
    'θ': r'\theta',
    'λ': r'\lambda',
    'μ': r'\mu',
    'π': r'\pi',
    'ρ': r'\rho',
    'σ': r'\sigma',
    'τ': r'\tau',
    'φ': r'\varphi',
    'ω': r'\omega',
    'Γ': r'\Gamma',
    'Δ': r'\Delta',
    'Λ': r'\Lambda',
    'Π': r'\Pi',
    'Σ': r'\Sigma',
    'Φ': r'\Phi',
    'Ω': r'\Omega',

    # Relations
    '∈': r'\in',
    '∉': r'\notin',
    '⊂': r'\subset',
    '⊆': r'\subseteq',
    '≤': r'\leq',
    '≥': r'\geq',
    '≠': r'\neq',
    '≈': r'\approx',
    '≡': r'\equiv',

    # Operators
    '×': r'\times',
    '·': r'\cdot',
    '±': r'\pm',
    '∞': r'\infty',
    '∑': r'\sum',
    '∏': r'\prod',
    '∫': r'\int',
    '∂': r'\partial',
    '√': r'\sqrt',

    # Arrows
    '→': r'\to',
    '←': r'\leftarrow',
    '⇒': r'\Rightarrow',
    '⇔': r'\Leftrightarrow',
}


class FormulaUnicode(Rule):
    """Flag non-ASCII characters inside <math> formulas."""
    name = "formula_unicode"
    severity = Severity.WARNING
    description = "Formulas should use LaTeX commands instead of Unicode symbols."
    examples = (
        Example(
            rule="formula_unicode",
            text="<math>α + β</math>\n",
            bad=True,
            explanation="Unicode symbols do not render reliably in texvc.",
        ),
        Example(
            rule="formula_unicode",
            text="<math>\\alpha + \\beta</math>\n",
            bad=False,
        ),
    )

    def check(self, node: Element, path: list[Element], settings) -> Iterator[Lint]:
        if not isinstance(node, Formula):
            return

        symbols = sorted({c for c in node.source if ord(c) > 127})
        if not symbols:
            return

        replacements = [f"{c} → {UNICODE_TO_LATEX[c]}" for c in symbols if c in UNICODE_TO_LATEX]
        solution = "Replace " + ", ".join(replacements) if replacements else \
            "Replace the characters with LaTeX commands."

        yield self.lint(
            node,
            f"Unicode characters in formula: {''.join(symbols)}",
            explanation="Unicode symbols do not render reliably in texvc.",
            solution=solution,
        )
