"""Root conftest for Sybil docstring code block testing.

This module configures Sybil to parse and test markdown code blocks
(```python and ```py) found in docstrings throughout the src/migreg codebase.
"""

from sybil import Sybil
from sybil.document import PythonDocStringDocument
from sybil.evaluators.python import PythonEvaluator
from sybil.parsers.markdown.codeblock import CodeBlockParser
from sybil.parsers.markdown.skip import SkipParser


def sybil_setup(namespace):
    """Give every docstring document a fresh current configuration."""
    from migreg.config import MigregConfig

    MigregConfig.reset()


def sybil_teardown(namespace):
    from migreg.config import MigregConfig

    MigregConfig.reset()


# SkipParser must come first to handle skip directives before code blocks
python_evaluator = PythonEvaluator()
parsers = [
    SkipParser(),
    CodeBlockParser(language="python", evaluator=python_evaluator),
    CodeBlockParser(language="py", evaluator=python_evaluator),
]

pytest_collect_file = Sybil(
    parsers=parsers,
    patterns=["src/migreg/*.py", "src/migreg/**/*.py"],
    document_types={".py": PythonDocStringDocument},
    setup=sybil_setup,
    teardown=sybil_teardown,
).pytest()
