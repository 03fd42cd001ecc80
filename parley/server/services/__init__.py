"""
Service layer.

Services hold the messaging rules (who may read or post where, how
conversations are listed, what a message looks like on the wire) on top of
the repository bundle. They raise ``parley.core.errors`` exceptions and
never touch HTTP or WebSocket objects.
"""
