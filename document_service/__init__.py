"""
Document ingestion service.

Stores submitted claims documents in S3 and announces them on SQS.
"""

__version__ = "0.1.0"
