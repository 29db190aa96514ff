"""
Question templates and the rules that walk them.

Visibility (dependencies), derived answers (derived_fields) and step
completion (engine) all operate on plain JSON-compatible dicts.
"""
