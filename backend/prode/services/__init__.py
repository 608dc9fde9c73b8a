"""
Services Layer

Pure computations that:
- Accept plain domain inputs (team ids, match records, rules)
- Return domain outputs (dataclasses)
- Do NOT depend on HTTP request/response objects
- Hold no state between calls
"""
