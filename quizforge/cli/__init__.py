"""Command-line tools for quizforge."""
