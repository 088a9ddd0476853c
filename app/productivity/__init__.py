"""
Monthly productivity scoring.

Aggregates a month of activity data into a bounded 0-100 score with a
tier and an auditable breakdown.
"""
