"""quizforge: cached quiz content selection.

Serves multiple-choice quiz questions from a two-tier cache (in-process
TTL cache backed by an optional shared Redis store), an LLM question
generator, or a curated question bank shipped as JSON topic files.
"""

__version__ = "0.1.0"
