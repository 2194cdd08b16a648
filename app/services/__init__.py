"""
Services Layer
Caller-facing operations. Services sequence integrity checks and
persistence calls and hand back plain dictionaries.
"""
