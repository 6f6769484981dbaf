"""
churchorg: organization chart, rosters and statistics for church administration
"""
