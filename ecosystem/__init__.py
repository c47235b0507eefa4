"""Core (UI-agnostic) startup ecosystem chart logic.

This package contains:
- data loading (JSON / XLSX -> list of row dicts)
- column resolution (concept -> header, English and Finnish)
- series building and unit normalization
- filter normalization
- chart compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
