"""Core constants shared by the engine and the store implementations."""

# Documents fetched per list query and deleted per atomic batch.
DEFAULT_PAGE_SIZE = 50

# Firestore rejects a commit with more than 500 writes.
MAX_BATCH_WRITES = 500

# Firestore path separator; collection paths have an odd number of segments.
PATH_SEP = "/"
