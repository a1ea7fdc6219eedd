"""
Assessment analytics engine for tutoring classes.

Turns raw per-attempt answer records from the spelling, punctuation,
stress-placement and generic multiple-choice test families into
teacher-facing statistics.
"""
