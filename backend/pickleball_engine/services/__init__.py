"""
Services Layer

Pure scoring, bracket and standings logic:
- Accept engine values (sets, formats, matches, participants)
- Return new values (results, slot updates, ranking rows)
- Do NOT depend on HTTP request/response objects
- Do NOT perform I/O or mutate their inputs
"""
