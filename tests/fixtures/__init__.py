"""
測試用 fixtures
"""
