"""Bundled curated question bank (``quizzes/*.json``)."""
