"""Concrete adapters behind the interfaces in ``quizforge.interfaces``."""
