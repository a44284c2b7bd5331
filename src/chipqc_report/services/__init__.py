"""
Service layer for ChIP-seq QC reports.

This subpackage contains code that interacts with the outside world:
sample sheets, serialized QC objects, figures and tables on disk.
"""
