"""Hub event names, client method names and room naming.

Server frames are ``{"event": <name>, "args": [...]}``; client frames are
``{"method": <name>, "args": [...]}``.
"""

# Server -> client events
NEW_MESSAGE = "NewMessage"
NEW_GROUP_MESSAGE = "NewGroupMessage"
USER_ONLINE = "UserOnline"
USER_OFFLINE = "UserOffline"
USER_TYPING = "UserTyping"
USER_TYPING_GROUP = "UserTypingGroup"
MESSAGE_REACTION_UPDATED = "MessageReactionUpdated"
MESSAGE_DELETED = "MessageDeleted"
GROUP_CREATED = "GroupCreated"
GROUP_MEMBER_REMOVED = "GroupMemberRemoved"
ERROR = "Error"

# Client -> server methods
JOIN_CHAT = "JoinChat"
LEAVE_CHAT = "LeaveChat"
JOIN_GROUP = "JoinGroup"
LEAVE_GROUP = "LeaveGroup"
SEND_TYPING = "SendTyping"
SEND_GROUP_TYPING = "SendGroupTyping"


def chat_room(chat_id: str) -> str:
    return f"Chat_{chat_id}"


def group_room(group_id: str) -> str:
    return f"Group_{group_id}"
