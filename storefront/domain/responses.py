GREETING = "Hi! I'm here to help you with any issues. What can I assist you with today?"

# Order matters: the first keyword found in the message wins.
CANNED_RESPONSES = [
    ("order", "I can help you with order-related issues. If you need to report a specific problem with your order, I'll create a support ticket for you."),
    ("delivery", "For delivery issues, please let me know what happened and I'll make sure our team addresses it promptly."),
    ("payment", "If you're having payment issues, I can help you report this to our support team for quick resolution."),
    ("product", "Having trouble with a product? I can help you file a report so our team can assist you."),
    ("account", "For account-related issues, I'll make sure our support team gets your information to help resolve any problems."),
    ("general", "I'm here to help with any general questions or concerns you might have about our service."),
]

FALLBACK_RESPONSE = "I understand your concern. Would you like me to create a support ticket for this issue so our team can help you?"

TICKET_TRIGGER_WORDS = ["issue", "problem", "help"]

TICKET_SUGGESTION = "Would you like me to create a support ticket for you? Click the button below to get started."

TICKET_CREATED = "Great! I've created a support ticket for you. Our team will review it and get back to you soon. Is there anything else I can help you with?"


def pick_response(message: str) -> str:
    lowered = message.lower()
    for keyword, response in CANNED_RESPONSES:
        if keyword in lowered:
            return response
    return FALLBACK_RESPONSE


def wants_ticket(message: str) -> bool:
    lowered = message.lower()
    return any(w in lowered for w in TICKET_TRIGGER_WORDS)
