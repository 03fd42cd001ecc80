"""Parley.

This package contains the backend of a real-time messaging application:
one-to-one chats, group conversations, reactions, read receipts, contacts
and a WebSocket hub that pushes presence, typing and message events to
connected clients.

Core subpackages
----------------

- ``parley.core``:

  - Logging configuration and domain exceptions.
  - Password hashing and JWT issuance/validation.
  - SQLModel entities, repositories and request/response models.

- ``parley.server``:

  - The FastAPI application, its routers and service layer.
  - The WebSocket hub (connection registry, rooms, event names).

Typical workflow
----------------

1. A client registers or logs in and receives a bearer token.
2. It opens ``/chathub?access_token=...`` to receive real-time events.
3. It calls the REST API to open chats, create groups and send messages;
   every state change is broadcast to the affected hub rooms.
"""
