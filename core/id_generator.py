import random

# Two-digit entity codes
TYPE_POSTFIX = {
    "users": 1,
    "posts": 2,
    "comments": 3,
    "likes": 4,
    "follows": 5,
    "saves": 6,
    "messages": 7,
    "notifications": 8,
    "contact_requests": 9,
    "push_subscriptions": 10,
    "uploads": 11,
}

# 13 random digits + 2-digit code stays below 2**53, so ids survive JSON.parse in the browser
RANDOM_DIGITS = 13
MAX_RANDOM = 10 ** RANDOM_DIGITS - 1


class IdAllocationError(RuntimeError):
    """No free id was found for a new row."""


def generate_random_id(entity: str) -> int:
    """Returns an id made of 13 random digits followed by the 2-digit entity code."""
    if entity not in TYPE_POSTFIX:
        raise ValueError(f"Unknown entity for ID generation: {entity}")
    rand = random.randint(1, MAX_RANDOM)
    postfix = TYPE_POSTFIX[entity]
    return rand * 100 + postfix
