#!/usr/bin/env python3
"""
Resume build CLI wrapper.

Examples:\n

    build_resume.py build resume.json -t latex-template

    build_resume.py list-templates

    build_resume.py check-tools
"""

from pause.cli import app

if __name__ == "__main__":
    app()
