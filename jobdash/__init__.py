"""
Job Dashboard — AI résumé analysis, cover letters and job history.

Sign in, analyze a résumé, open pre-filled job-site searches, draft cover
letters and keep a personal history of the jobs you visited.
"""

__version__ = "1.0.0"
