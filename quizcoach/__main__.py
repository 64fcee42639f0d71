"""
Entry point for running quiz-coach as a module.

Usage:
    python -m quizcoach practice
    python -m quizcoach review --topic "Binary Tree"
    python -m quizcoach --help
"""
from .cli import main

if __name__ == "__main__":
    main()
