"""Staffing scoring and analysis engine.

Sub-modules:
- matching         – candidate scoring (remote model or keyword overlap)
- profile          – employee records → TeamProfile
- team_analysis    – rule battery, fallback report, validation
- analysis_service – soft-fail single-team analysis & team comparison
- effectiveness    – coverage / balance / synergy scores
- capacity         – monthly capacity forecast, skill gaps, dashboard
"""
