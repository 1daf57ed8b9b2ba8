"""Built-in questions served when no curated topic matches a request.

Deliberately general (web, data structures, APIs) so they make sense for
any programming topic.
"""

from __future__ import annotations

from typing import Any

DEFAULT_QUESTIONS: tuple[dict[str, Any], ...] = (
    {
        "question": "What does HTML stand for?",
        "options": [
            "Hyper Text Markup Language",
            "High Tech Modern Language",
            "Hyper Transfer Markup Language",
            "Home Tool Markup Language",
        ],
        "correctIndex": 0,
        "explanation": (
            "HTML stands for Hyper Text Markup Language, which is the standard "
            "markup language for creating web pages."
        ),
        "concept": "HTML Basics",
        "hint": "Think about what web pages are made of",
        "difficulty": "easy",
    },
    {
        "question": "Which keyword is used to declare a variable in JavaScript?",
        "options": ["var", "variable", "v", "declare"],
        "correctIndex": 0,
        "explanation": (
            "In JavaScript, 'var', 'let', and 'const' are used to declare "
            "variables. 'var' was the original keyword."
        ),
        "concept": "JavaScript Variables",
        "hint": "It's a 3-letter keyword",
        "difficulty": "easy",
    },
    {
        "question": "What is the time complexity of binary search?",
        "options": ["O(log n)", "O(n)", "O(n²)", "O(1)"],
        "correctIndex": 0,
        "explanation": (
            "Binary search has O(log n) time complexity because it divides the "
            "search space in half each iteration."
        ),
        "concept": "Algorithms - Searching",
        "hint": "It divides the search space in half each time",
        "difficulty": "medium",
    },
    {
        "question": "What does CSS stand for?",
        "options": [
            "Cascading Style Sheets",
            "Computer Style Sheets",
            "Creative Style System",
            "Colorful Style Sheets",
        ],
        "correctIndex": 0,
        "explanation": "CSS stands for Cascading Style Sheets, used to style HTML elements.",
        "concept": "CSS Basics",
        "hint": "It describes how styles 'cascade' through elements",
        "difficulty": "easy",
    },
    {
        "question": "Which data structure uses LIFO (Last In, First Out)?",
        "options": ["Stack", "Queue", "Array", "Linked List"],
        "correctIndex": 0,
        "explanation": "A Stack uses LIFO - the last element added is the first one removed.",
        "concept": "Data Structures",
        "hint": "Think of a stack of plates",
        "difficulty": "medium",
    },
    {
        "question": "What is the purpose of a constructor in OOP?",
        "options": [
            "Initialize object properties",
            "Delete objects",
            "Print object details",
            "Clone objects",
        ],
        "correctIndex": 0,
        "explanation": "A constructor initializes object properties when an object is created.",
        "concept": "Object-Oriented Programming",
        "hint": "It 'constructs' the initial state",
        "difficulty": "medium",
    },
    {
        "question": "What does API stand for?",
        "options": [
            "Application Programming Interface",
            "Advanced Programming Integration",
            "Automated Processing Input",
            "Application Process Interface",
        ],
        "correctIndex": 0,
        "explanation": (
            "API stands for Application Programming Interface - a set of "
            "protocols for building software."
        ),
        "concept": "APIs",
        "hint": "It's an 'interface' for programming",
        "difficulty": "easy",
    },
    {
        "question": "Which SQL command is used to retrieve data?",
        "options": ["SELECT", "GET", "FETCH", "RETRIEVE"],
        "correctIndex": 0,
        "explanation": "SELECT is the SQL command used to retrieve data from a database.",
        "concept": "SQL",
        "hint": "You 'select' what data you want",
        "difficulty": "easy",
    },
    {
        "question": "What is recursion?",
        "options": [
            "A function calling itself",
            "A loop that runs forever",
            "A type of variable",
            "A sorting algorithm",
        ],
        "correctIndex": 0,
        "explanation": (
            "Recursion is when a function calls itself to solve a smaller "
            "instance of the same problem."
        ),
        "concept": "Recursion",
        "hint": "It involves self-reference",
        "difficulty": "medium",
    },
    {
        "question": "What does REST stand for in RESTful APIs?",
        "options": [
            "Representational State Transfer",
            "Remote State Transfer",
            "Real-time State Transfer",
            "Request State Transfer",
        ],
        "correctIndex": 0,
        "explanation": (
            "REST stands for Representational State Transfer, an architectural "
            "style for web services."
        ),
        "concept": "REST APIs",
        "hint": "It's about transferring state representations",
        "difficulty": "medium",
    },
)
