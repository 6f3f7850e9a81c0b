"""
Catalog edit guard - time-windowed ownership authorization for user-created records.
"""
