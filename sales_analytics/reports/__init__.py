"""
Report catalogue over the cleaned ``retail_sales`` snapshot.

Every report is a pure function of the cleaned DataFrame and never mutates it.
"""
