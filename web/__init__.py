"""
Web interface for the scheduling kernel simulator
"""
