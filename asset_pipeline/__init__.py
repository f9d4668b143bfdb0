"""
asset-pipeline: staged CSV import pipeline for physical asset records.

Rows flow through EXTRACT, CLEAN and TRANSFORM into a per-job staging area
and are only written to the asset store after an operator approves the job.
"""

__version__ = "0.1.0"
