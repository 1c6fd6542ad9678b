"""Event to notification fan-out service.

Turns user actions (likes, follows, comments, new posts, mentions, shares)
into per-recipient notification records.
"""
