"""
artifactsets: resolve loosely specified path patterns into named, deduplicated
file sets, each with a common root directory, ready to archive or upload.
"""
