"""
Data models, instrument universe and input validation.
"""
