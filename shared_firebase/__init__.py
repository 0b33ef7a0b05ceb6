"""Tree replication and guarded recursive deletion for Cloud Firestore."""

__version__ = "0.1.0"
