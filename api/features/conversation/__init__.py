"""Conversation feature package: entities, repositories, service, controller, routers.

Direct messages between portal users. The first message between two users
opens a PENDING conversation; the receiver accepts it to move it from their
requests list to their primary list.
"""
