GENERAL_CHAT_PROMPT = """You are an intelligent personal assistant. You can help with:
- Checking and managing calendar events
- Writing and managing emails
- General queries and conversations

When users ask about their calendar, offer to schedule a meeting for them.
When users ask about emails, offer to check their unread emails and draft replies.

Be helpful, concise, and professional."""


# Meeting flow

MISSING_BOTH_PROMPT = """I'd be happy to schedule a meeting for you! What should the meeting be called, and when should it take place?

For example: "Sales review, tomorrow at 2pm" or "Team sync on Friday 10am"."""

MISSING_TITLE_PROMPT = """Got it, {time}. What should the meeting be called?

For example: "Quarterly planning" or "1:1 with Sarah"."""

MISSING_TIME_PROMPT = """Great, "{title}". When should it take place?

For example: "tomorrow at 2pm", "Friday 10am CAT" or "2024-03-01 9:30am"."""

CONFIRMATION_PROMPT = """Here's what I have:

Title: {title}
Time: {time}

Say "confirm" to add it to your calendar, or tell me what to change."""

LOOP_RESET_MESSAGE = """Let's start fresh. I had trouble putting the meeting details together.

Please tell me the meeting title and time in one message, for example: "Sales review, tomorrow at 2pm"."""

MEETING_CANCELLED_MESSAGE = "No problem, I've cancelled that meeting request. Let me know if you need anything else."


# Email flow

NO_UNREAD_EMAILS_MESSAGE = "You're all caught up, there are no unread emails in your inbox."

UNREAD_EMAILS_HEADER = "You have {count} unread email{plural}:"

UNREAD_EMAILS_MORE = "...and {count} more."

DRAFT_OFFER_PROMPT = "Would you like me to draft replies for these emails? (yes/no)"

DRAFT_OFFER_REPROMPT = "Should I draft replies to your unread emails? Please answer yes or no."

DRAFT_NEXT_PROMPT = "\n\nSay \"next\" to draft the next {count}, or \"cancel\" to stop."

DRAFT_CONTINUE_REPROMPT = "Say \"next\" to draft more replies, or \"cancel\" to stop."

DRAFTS_COMPLETE_MESSAGE = "\n\nThat's all of your unread emails. Let me know if you need anything else."

DRAFTS_DECLINED_MESSAGE = "Okay, I won't draft any replies. Let me know if you need anything else."

DRAFTS_CANCELLED_MESSAGE = "Okay, I've stopped drafting replies. Let me know if you need anything else."


# Collaborator failures

EMAIL_AUTH_MESSAGE = "I couldn't reach your inbox because your email connection has expired. Please log in again or reconnect your email account."

EMAIL_FAILURE_MESSAGE = "Sorry, I couldn't fetch your emails right now. Please try again in a moment."

CHAT_FAILURE_MESSAGE = "Sorry, I'm having trouble responding right now. Please try again in a moment."
