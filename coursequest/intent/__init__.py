"""Intent extraction and filter validation.

The intent layer converts an English free-text course question into a raw filter map, and
validates that map (or an explicit parameter map) into a strict `FilterSet`, which is then
compiled into deterministic, parameterized SQL.
"""
