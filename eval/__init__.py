"""
Evaluation helpers: batch question runs against the QA agent.
"""
